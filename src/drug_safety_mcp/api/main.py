"""FastAPI application serving MCP over Streamable HTTP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import Receive, Scope, Send

from drug_safety_mcp import SERVER_NAME, __version__
from drug_safety_mcp.api.auth import (
    GatewayAuthenticator,
    OAuthConfig,
    authorization_server_metadata,
    unauthorized_response,
    validate_oauth_config,
)
from drug_safety_mcp.config import Settings, get_settings
from drug_safety_mcp.data_sources.fda import OpenFDAClient
from drug_safety_mcp.mcp_server import create_mcp_server
from drug_safety_mcp.tools.dispatcher import ToolDispatcher
from drug_safety_mcp.utils.rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)


class MCPEndpoint:
    """ASGI endpoint for ``/mcp``: auth and rate-limit gate in front of the session manager."""

    def __init__(
        self,
        session_manager: StreamableHTTPSessionManager,
        authenticator: GatewayAuthenticator,
        rate_limiter: SlidingWindowRateLimiter | None = None,
    ):
        self.session_manager = session_manager
        self.authenticator = authenticator
        self.rate_limiter = rate_limiter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        result = await self.authenticator.authenticate(request.headers.get("authorization"))
        if not result.authenticated:
            response = unauthorized_response(result.error or "")
            await response(scope, receive, send)
            return

        if self.rate_limiter is not None:
            if result.user is not None:
                client_id = result.user.user_id
            else:
                client_id = request.client.host if request.client else "anonymous"
            if not self.rate_limiter.check(client_id):
                logger.warning("Rate limit exceeded for %s", client_id)
                response = JSONResponse(
                    {
                        "error": "rate_limited",
                        "error_description": "Too many requests. Please slow down.",
                    },
                    status_code=429,
                    headers={"Retry-After": str(self.rate_limiter.retry_after(client_id))},
                )
                await response(scope, receive, send)
                return

        if result.user is not None:
            logger.debug("MCP request from %s", result.user.email)
        await self.session_manager.handle_request(scope, receive, send)


def create_app(
    settings: Settings | None = None,
    dispatcher: ToolDispatcher | None = None,
    authenticator: GatewayAuthenticator | None = None,
    rate_limiter: SlidingWindowRateLimiter | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    oauth = OAuthConfig.from_settings(settings)
    validate_oauth_config(oauth)

    dispatcher = dispatcher or ToolDispatcher(OpenFDAClient())
    authenticator = authenticator or GatewayAuthenticator(
        oauth,
        cache_ttl_seconds=settings.auth_cache_ttl_seconds,
        timeout_seconds=settings.request_timeout_seconds,
    )
    if rate_limiter is None and settings.rate_limit_per_minute > 0:
        rate_limiter = SlidingWindowRateLimiter(settings.rate_limit_per_minute)

    session_manager = StreamableHTTPSessionManager(app=create_mcp_server(dispatcher))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info(
                "%s v%s listening, MCP endpoint %s/mcp (OAuth %s)",
                SERVER_NAME,
                __version__,
                settings.public_base_url,
                "enabled" if oauth.enabled else "disabled",
            )
            try:
                yield
            finally:
                await authenticator.close()
                await dispatcher.close()

    app = FastAPI(
        title="Drug Safety MCP",
        description="MCP server for FDA adverse event, label and recall data",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.cors_origin.split(",")],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "name": SERVER_NAME, "version": __version__}

    @app.get("/.well-known/oauth-authorization-server")
    async def oauth_metadata() -> dict[str, object]:
        if not oauth.enabled:
            raise HTTPException(status_code=404, detail="OAuth is not enabled")
        return authorization_server_metadata(oauth)

    app.router.add_route(
        "/mcp",
        MCPEndpoint(session_manager, authenticator, rate_limiter),
        methods=["GET", "POST", "DELETE"],
        include_in_schema=False,
    )
    return app


def run_http(settings: Settings) -> None:
    app = create_app(settings)
    uvicorn.run(
        app, host=settings.host, port=settings.port, log_level=settings.log_level.lower()
    )
