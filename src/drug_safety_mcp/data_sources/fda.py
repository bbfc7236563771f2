"""
openFDA client covering the three drug endpoints this server wraps.

Four methods:
  1. search_events     : individual FAERS case reports
  2. count_events      : FAERS aggregation on one field
  3. search_labels     : SPL drug labels
  4. search_enforcement: recall / enforcement reports
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from drug_safety_mcp.config import Settings, get_settings
from drug_safety_mcp.constants import (
    OPENFDA_ENFORCEMENT_URL,
    OPENFDA_EVENT_URL,
    OPENFDA_LABEL_URL,
    OPENFDA_NOT_FOUND_CODE,
)
from drug_safety_mcp.data_sources.base_client import (
    BaseClient,
    ClientConfig,
    RequestContext,
    UpstreamError,
)
from drug_safety_mcp.models.model_fda import OpenFDAEnvelope

logger = logging.getLogger("drug_safety_mcp.data_sources.fda")


class ApiKeyProvider:
    """Resolves the openFDA API key once per process.

    The environment (``OPENFDA_API_KEY``) wins; otherwise the key is read
    lazily from a mounted secret file the first time it is needed. A missing
    key is not an error: openFDA falls back to its lower anonymous quota.
    """

    def __init__(self, api_key: str = "", secret_file: Path | None = None) -> None:
        self._env_key = api_key
        self._secret_file = secret_file
        self._resolved: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ApiKeyProvider:
        return cls(settings.openfda_api_key, settings.openfda_api_key_file)

    def get(self) -> str:
        if self._resolved is None:
            self._resolved = self._env_key or self._read_secret()
            if not self._resolved:
                logger.warning(
                    "No openFDA API key configured - using the anonymous quota "
                    "(1,000 requests/day)"
                )
        return self._resolved

    @property
    def configured(self) -> bool:
        return bool(self.get())

    def _read_secret(self) -> str:
        if self._secret_file is None:
            return ""
        try:
            return self._secret_file.read_text().strip()
        except OSError as e:
            logger.debug("API key secret file %s unavailable: %s", self._secret_file, e)
            return ""


class OpenFDAClient(BaseClient):
    """Client for the openFDA drug event, label and enforcement endpoints."""

    def __init__(
        self,
        api_key_provider: ApiKeyProvider | None = None,
        config: ClientConfig | None = None,
    ) -> None:
        if config is None:
            config = ClientConfig(timeout_seconds=get_settings().request_timeout_seconds)
        super().__init__(config)
        self.api_keys = api_key_provider or ApiKeyProvider.from_settings(get_settings())

    @property
    def _source_name(self) -> str:
        return "openfda"

    # -- Public methods -------------------------------------------------------

    async def search_events(
        self, search: str, limit: int | None = None, skip: int | None = None
    ) -> OpenFDAEnvelope:
        """Return individual FAERS reports matching a search expression."""
        return await self._fetch(
            OPENFDA_EVENT_URL, "search_events", search=search, limit=limit, skip=skip
        )

    async def count_events(
        self, search: str, count: str, limit: int | None = None
    ) -> OpenFDAEnvelope:
        """Return ``{term, count}`` buckets for one FAERS field."""
        return await self._fetch(
            OPENFDA_EVENT_URL, "count_events", search=search, count=count, limit=limit
        )

    async def search_labels(self, search: str, limit: int | None = 1) -> OpenFDAEnvelope:
        """Return drug label records matching a search expression."""
        return await self._fetch(
            OPENFDA_LABEL_URL, "search_labels", search=search, limit=limit
        )

    async def search_enforcement(
        self, search: str, limit: int | None = None
    ) -> OpenFDAEnvelope:
        """Return enforcement (recall) reports matching a search expression."""
        return await self._fetch(
            OPENFDA_ENFORCEMENT_URL, "search_enforcement", search=search, limit=limit
        )

    # -- Private helpers ------------------------------------------------------

    def _build_params(
        self,
        search: str | None = None,
        count: str | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> dict[str, str]:
        """Build query parameters, dropping anything unset."""
        params: dict[str, str] = {}
        api_key = self.api_keys.get()
        if api_key:
            params["api_key"] = api_key
        if search:
            params["search"] = search
        if count:
            params["count"] = count
        if limit:
            params["limit"] = str(limit)
        if skip:
            params["skip"] = str(skip)
        return params

    async def _fetch(self, url: str, method: str, **query: Any) -> OpenFDAEnvelope:
        params = self._build_params(**query)
        context = RequestContext(
            source=self._source_name,
            method=method,
            params={k: v for k, v in params.items() if k != "api_key"},
        )
        try:
            data = await self._rest_get(url, params, context=context)
        except UpstreamError as e:
            if e.code == OPENFDA_NOT_FOUND_CODE:
                logger.info("No matches [%s.%s]", self._source_name, method)
                return OpenFDAEnvelope()
            raise
        return OpenFDAEnvelope.model_validate(data)
