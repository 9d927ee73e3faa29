"""
Proxy Routes - UptimeRobot Request Forwarding
=============================================

This module implements the browser-facing endpoint that forwards monitor
queries to UptimeRobot with the server-side API key injected.

Security Model:
---------------
1. The UptimeRobot API key lives only in the proxy environment
2. The browser sends a JSON object of optional getMonitors parameters
3. The proxy adds the API key and fixed options, then POSTs upstream
4. The API key is never logged and never returned to the browser

Endpoints:
----------
- POST /api/get-monitors: Forward a getMonitors query to UptimeRobot
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response
import httpx

from ..config import CredentialProvider, SettingsCredentialProvider, get_settings
from ..errors import ProxyError, UnexpectedError
from .upstream import fetch_monitors

logger = logging.getLogger(__name__)

# Create router
proxy_router = APIRouter()


# ============================================================================
# Dependencies
# ============================================================================

def get_credential_provider() -> CredentialProvider:
    """
    Dependency returning the API key source.

    Tests override this with a StaticCredentialProvider.
    """
    return SettingsCredentialProvider()


def get_upstream_client(request: Request) -> httpx.AsyncClient:
    """
    Dependency to get the shared UptimeRobot HTTP client from app state.

    Args:
        request: FastAPI request object

    Returns:
        httpx.AsyncClient created during application startup

    Raises:
        UnexpectedError: If the lifespan has not created the client
    """
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise UnexpectedError("Upstream client not initialized")

    return client


# ============================================================================
# Proxy Endpoints
# ============================================================================

@proxy_router.post("/get-monitors")
async def get_monitors(
    request: Request,
    credentials: CredentialProvider = Depends(get_credential_provider),
    upstream_client: httpx.AsyncClient = Depends(get_upstream_client),
) -> Response:
    """
    Proxy a getMonitors query to UptimeRobot.

    The body is read raw rather than through a Pydantic model so that
    malformed JSON is reported as a 500 with the parser message.

    Returns:
        UptimeRobot JSON on success, otherwise the plain-text response of
        the ProxyError variant that was raised
    """
    settings = get_settings()

    try:
        data = await fetch_monitors(
            upstream_client,
            settings.upstream_url_str,
            credentials.get_api_key(),
            await request.body(),
            protect_api_key=settings.PROTECT_API_KEY,
        )
    except ProxyError as e:
        return e.to_response()

    return JSONResponse(content=data, status_code=status.HTTP_200_OK)
