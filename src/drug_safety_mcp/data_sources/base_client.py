"""
Base client for external data sources.

Provides: lazy aiohttp session management, a single-shot JSON GET,
structured logging, and a typed error taxonomy. There is deliberately no
retry, backoff or caching layer here: a failed upstream call surfaces
immediately to the tool that issued it.
"""

import asyncio
import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import BaseModel
from yarl import URL

logger = logging.getLogger("drug_safety_mcp.data_sources")

_PHRASE = re.compile(r'"(?:\\.|[^"\\])*"')
_OPERATOR_SAFE = ":[]()+*.-_"
_PHRASE_SAFE = ":[]()*.-_"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ClientConfig(BaseModel):
    """HTTP client settings."""

    timeout_seconds: float | None = None  # None -> aiohttp default


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "openfda"
    method: str  # e.g. "count_events"
    params: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DataSourceError(Exception):
    """Base exception for data source failures."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        self.detail = message
        super().__init__(f"[{source}] {message}")


class UpstreamError(DataSourceError):
    """The upstream API answered with an explicit error object."""

    def __init__(
        self,
        source: str,
        message: str,
        code: str = "",
        status_code: int | None = None,
    ):
        self.code = code
        super().__init__(source, message, status_code=status_code)


class FetchError(DataSourceError):
    """The request never produced a usable JSON payload (DNS, timeout, non-JSON body)."""

    pass


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for REST clients.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()`.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self._session: aiohttp.ClientSession | None = None

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'openfda'."""
        ...

    # -- Session management --------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            if self.config.timeout_seconds is not None:
                timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
                self._session = aiohttp.ClientSession(timeout=timeout)
            else:
                self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # -- Core request ---------------------------------------------------------

    async def _rest_get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        context: RequestContext | None = None,
    ) -> dict[str, Any]:
        """
        Issue exactly one GET and return the decoded JSON payload.

        Parameters
        ----------
        url : str
            Full endpoint URL.
        params : dict
            Query string parameters. Values are sent as given.
        context : RequestContext, optional
            Logging context.

        Raises
        ------
        UpstreamError
            The payload is JSON and carries an ``error`` object.
        FetchError
            Network failure, timeout, or a body that is not JSON.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        start = time.monotonic()

        logger.info(
            "Request [%s.%s] url=%s params=%s", ctx.source, ctx.method, url, ctx.params
        )

        try:
            session = await self._get_session()
            # openFDA reads a literal '+' between query terms; build the query
            # string by hand so aiohttp does not re-encode it.
            async with session.get(URL(_with_query(url, params), encoded=True)) as resp:
                status = resp.status
                try:
                    data = await resp.json(content_type=None)
                except ValueError as e:
                    raise FetchError(
                        ctx.source,
                        f"Non-JSON response (HTTP {status}): {e}",
                        status_code=status,
                    ) from e

        except asyncio.TimeoutError as e:
            elapsed = time.monotonic() - start
            logger.warning(
                "Timeout [%s.%s] elapsed=%.1fs", ctx.source, ctx.method, elapsed
            )
            raise FetchError(ctx.source, f"Timeout after {elapsed:.1f}s") from e

        except aiohttp.ClientError as e:
            logger.warning("Connection error [%s.%s]: %s", ctx.source, ctx.method, e)
            raise FetchError(ctx.source, f"Connection error: {e}") from e

        if not isinstance(data, dict):
            raise FetchError(
                ctx.source, f"Unexpected JSON payload type: {type(data).__name__}"
            )

        if data.get("error"):
            error = data["error"]
            code = str(error.get("code", "")) if isinstance(error, dict) else ""
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise UpstreamError(ctx.source, message, code=code, status_code=status)

        elapsed = time.monotonic() - start
        logger.info(
            "Success [%s.%s] status=%d elapsed=%.2fs",
            ctx.source,
            ctx.method,
            status,
            elapsed,
        )
        return data


def _with_query(url: str, params: dict[str, Any]) -> str:
    """Append params to url without percent-encoding openFDA query operators."""
    if not params:
        return url
    query = "&".join(f"{key}={_encode_value(value)}" for key, value in params.items())
    return f"{url}?{query}"


def _encode_value(value: Any) -> str:
    # Outside quoted phrases "+" is an openFDA operator and passes through.
    # Inside one it is user text, so it goes out as %2B.
    text = str(value)
    parts = []
    pos = 0
    for match in _PHRASE.finditer(text):
        parts.append(_encode(text[pos : match.start()], _OPERATOR_SAFE))
        parts.append(_encode(match.group(), _PHRASE_SAFE))
        pos = match.end()
    parts.append(_encode(text[pos:], _OPERATOR_SAFE))
    return "".join(parts)


def _encode(text: str, safe: str) -> str:
    # Spaces become "+", which openFDA reads as a space.
    return quote(text, safe=safe).replace("%20", "+")
