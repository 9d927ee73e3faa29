"""
FastAPI Proxy Application Factory
=================================

This is the main entry point for the proxy service that sits between the
status-page front-end and the UptimeRobot API.

Architecture:
    Browser → Uptime Status Proxy (this service) → UptimeRobot v2 API

Routers:
    - /api/get-monitors : getMonitors query with the API key injected
    - /health           : Health check endpoint

Environment Variables:
    - UPTIMEROBOT_API_KEY: UptimeRobot API key (required for /api/get-monitors)
    - UPTIMEROBOT_API_URL: getMonitors endpoint (default: https://api.uptimerobot.com/v2/getMonitors)
    - PROTECT_API_KEY: Ignore client-supplied api_key overrides (default: false)
    - ALLOWED_ORIGINS: Comma-separated CORS origins (e.g., "https://status.example.com")
    - LOG_LEVEL: Logging level (default: INFO)

Running the Service:
    Development:
        uvicorn uptime_proxy.app.main:app --reload --host 0.0.0.0 --port 8080

    Production:
        uvicorn uptime_proxy.app.main:app --host 0.0.0.0 --port 8080 --workers 4
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
import uvicorn

from .config import get_settings
from .errors import ProxyError, UnexpectedError
from .models import HealthResponse, ServiceInfo
from .proxy import proxy_router
from .proxy.routes import get_credential_provider
from .proxy.upstream import create_upstream_client

SERVICE_NAME = "uptime-status-proxy"
SERVICE_VERSION = "1.0.0"


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "module": "%(module)s", "function": "%(funcName)s"}',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup tasks:
        - Configure logging
        - Create the shared httpx.AsyncClient used for UptimeRobot calls

    Shutdown tasks:
        - Close the HTTP client and its connection pool
    """
    settings = get_settings()

    setup_logging(settings.LOG_LEVEL)
    logger = logging.getLogger("uptime_proxy.main")

    app.state.http_client = create_upstream_client(settings.UPTIMEROBOT_TIMEOUT_SECONDS)

    logger.info(
        "Uptime status proxy started",
        extra={
            "upstream_url": settings.upstream_url_str,
            "credential_configured": settings.api_key_configured,
            "protect_api_key": settings.PROTECT_API_KEY,
        }
    )
    if not settings.api_key_configured:
        logger.warning("UPTIMEROBOT_API_KEY is not set, /api/get-monitors will return 500")

    yield

    logger.info("Shutting down uptime status proxy")
    await app.state.http_client.aclose()
    app.state.http_client = None


def create_app() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
        - Lifespan management
        - CORS middleware (only when ALLOWED_ORIGINS is set)
        - Route handlers
        - Exception handlers

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Uptime Status Proxy",
        description="Server-side proxy that injects the UptimeRobot API key",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    origins = settings.allowed_origins_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    app.include_router(proxy_router, prefix="/api", tags=["UptimeRobot Proxy"])

    @app.get("/health", tags=["System"], response_model=HealthResponse)
    async def health_check(credentials=Depends(get_credential_provider)) -> HealthResponse:
        """
        Health check endpoint.

        Reports whether the API key is configured without revealing it.
        """
        return HealthResponse(
            status="ok",
            service=SERVICE_NAME,
            version=SERVICE_VERSION,
            credential_configured=bool(credentials.get_api_key()),
        )

    @app.get("/", tags=["System"], response_model=ServiceInfo)
    async def root() -> ServiceInfo:
        return ServiceInfo(
            service=SERVICE_NAME,
            version=SERVICE_VERSION,
            description="Server-side proxy that injects the UptimeRobot API key",
            endpoints={
                "health": "/health",
                "get_monitors": "/api/get-monitors",
            },
        )

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> PlainTextResponse:
        """Render ProxyErrors raised outside the route body, e.g. in dependencies."""
        logging.getLogger("uptime_proxy.main").error(
            f"Proxy error: {exc.detail}",
            extra={"path": request.url.path, "exception_type": type(exc).__name__},
        )
        return exc.to_response()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
        """
        Global exception handler for unhandled errors.

        Returns the same plain-text 500 as the proxy's UnexpectedError.
        """
        logger = logging.getLogger("uptime_proxy.main")
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra={
                "path": request.url.path,
                "method": request.method,
                "exception_type": type(exc).__name__
            },
            exc_info=True
        )

        return UnexpectedError.from_exception(exc).to_response()

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    settings = get_settings()

    uvicorn.run(
        "uptime_proxy.app.main:app",
        host=settings.PROXY_HOST,
        port=settings.PROXY_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
