"""
Bearer-token authentication delegated to the MCP gateway.

The gateway owns the OAuth authorization-code flow; this server only
advertises the gateway's endpoints and validates bearer tokens against the
gateway's userinfo endpoint, caching successful validations.
"""

import asyncio
import logging

import aiohttp
from pydantic import BaseModel, ConfigDict
from starlette.responses import JSONResponse

from drug_safety_mcp import SERVER_NAME
from drug_safety_mcp.config import Settings
from drug_safety_mcp.utils.cache import ExpiringStore

logger = logging.getLogger(__name__)


class AuthConfigError(Exception):
    """OAuth is enabled but cannot work with the given settings."""

    pass


class OAuthConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    gateway_url: str = ""
    base_url: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "OAuthConfig":
        return cls(
            enabled=settings.oauth_enabled,
            gateway_url=settings.mcp_gateway_url,
            base_url=settings.public_base_url,
        )


class GatewayEndpoints(BaseModel):
    authorization_endpoint: str
    token_endpoint: str
    userinfo_endpoint: str
    registration_endpoint: str


class AuthenticatedUser(BaseModel):
    user_id: str
    email: str


class AuthResult(BaseModel):
    authenticated: bool
    user: AuthenticatedUser | None = None
    error: str | None = None


def validate_oauth_config(config: OAuthConfig) -> None:
    if not config.enabled:
        return
    if not config.gateway_url:
        raise AuthConfigError(
            "OAuth 2.0 is enabled but MCP_GATEWAY_URL is not set. Set it or disable "
            "OAuth by unsetting OAUTH_ENABLED."
        )


def gateway_endpoints(config: OAuthConfig) -> GatewayEndpoints:
    base = config.gateway_url.rstrip("/")
    return GatewayEndpoints(
        authorization_endpoint=f"{base}/oauth/authorize",
        token_endpoint=f"{base}/oauth/token",
        userinfo_endpoint=f"{base}/oauth/userinfo",
        registration_endpoint=f"{base}/oauth/register",
    )


def authorization_server_metadata(config: OAuthConfig) -> dict[str, object]:
    """RFC 8414 metadata pointing clients at the gateway."""
    endpoints = gateway_endpoints(config)
    return {
        "issuer": config.gateway_url.rstrip("/"),
        **endpoints.model_dump(),
        "response_types_supported": ["code"],
        "grant_types_supported": ["authorization_code", "refresh_token"],
        "code_challenge_methods_supported": ["S256"],
        "token_endpoint_auth_methods_supported": ["none"],
    }


def extract_bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        return None
    return parts[1]


_SAFE_MESSAGES: tuple[tuple[str, str], ...] = (
    ("missing authorization header", "Authentication required. Please sign in."),
    ("invalid token format", "Invalid authentication token. Please sign in again."),
    ("invalid or expired token", "Your session has expired. Please sign in again."),
    ("token validation failed", "Authentication failed. Please try again."),
    (
        "gateway validation failed",
        "Authentication service unavailable. Please try again later.",
    ),
)


def sanitize_error_message(error: str) -> str:
    """Map an internal auth failure to a client-safe message."""
    lowered = error.lower()
    for pattern, safe in _SAFE_MESSAGES:
        if pattern in lowered:
            return safe
    return "Authentication failed. Please sign in again."


def unauthorized_response(error: str) -> JSONResponse:
    logger.warning("Unauthorized: %s", error)
    return JSONResponse(
        {"error": "unauthorized", "error_description": sanitize_error_message(error)},
        status_code=401,
        headers={
            "WWW-Authenticate": f'Bearer realm="{SERVER_NAME}", error="invalid_token"'
        },
    )


class GatewayAuthenticator:
    """Validates bearer tokens with the gateway's userinfo endpoint."""

    def __init__(
        self,
        config: OAuthConfig,
        cache: ExpiringStore | None = None,
        cache_ttl_seconds: float = 3600,
        timeout_seconds: float | None = None,
    ):
        self.config = config
        self.cache = cache or ExpiringStore(cache_ttl_seconds)
        self._timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = (
                aiohttp.ClientTimeout(total=self._timeout_seconds)
                if self._timeout_seconds is not None
                else aiohttp.ClientTimeout()
            )
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def authenticate(self, authorization: str | None) -> AuthResult:
        if not self.config.enabled:
            return AuthResult(authenticated=True)

        if not authorization:
            return AuthResult(
                authenticated=False,
                error="Missing Authorization header. Please sign in via the OAuth flow.",
            )
        token = extract_bearer_token(authorization)
        if token is None:
            return AuthResult(authenticated=False, error="Invalid token format")

        cached = self.cache.get(token)
        if cached is not None:
            return AuthResult(authenticated=True, user=cached)

        result = await self.validate_token(token)
        if result.authenticated and result.user is not None:
            self.cache.set(token, result.user)
        return result

    async def validate_token(self, token: str) -> AuthResult:
        url = gateway_endpoints(self.config).userinfo_endpoint
        session = await self._get_session()
        try:
            async with session.get(
                url, headers={"Authorization": f"Bearer {token}"}
            ) as resp:
                if resp.status == 401:
                    return AuthResult(
                        authenticated=False,
                        error="Invalid or expired token. Please sign in again.",
                    )
                if resp.status >= 400:
                    return AuthResult(
                        authenticated=False,
                        error=f"Token validation failed: {resp.status}",
                    )
                info = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            return AuthResult(
                authenticated=False, error=f"Gateway validation failed: {e}"
            )

        if not isinstance(info, dict) or not info.get("sub"):
            return AuthResult(
                authenticated=False, error="Token validation failed: no subject"
            )
        user_id = str(info["sub"])
        return AuthResult(
            authenticated=True,
            user=AuthenticatedUser(
                user_id=user_id,
                email=str(info.get("email") or info.get("name") or user_id),
            ),
        )
