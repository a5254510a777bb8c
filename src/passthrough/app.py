"""FastAPI application factory for the passthrough proxy."""

import logging
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import InvalidMethodError, UpstreamTransportError
from .routers import proxy_route
from .services import Forwarder, RequestLogger

logger = structlog.get_logger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure structured logging for operational messages."""
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper())
        ),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    request_logger: RequestLogger | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the outbound client and
    ``request_logger`` replaces the file-backed event log; both exist so the
    app can be wired against fakes.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        event_log = request_logger or RequestLogger(
            settings.log_file, max_console_chars=settings.console_max_chars
        )
        event_log.open()
        client = httpx.AsyncClient(
            timeout=settings.upstream_timeout,
            follow_redirects=settings.follow_redirects,
            transport=transport,
        )
        # Outbound headers come only from the filtered inbound request.
        client.headers.clear()
        app.state.forwarder = Forwarder(settings.base_url, client, event_log)
        logger.info("Passthrough started", base_url=settings.base_url)

        try:
            yield
        finally:
            await client.aclose()
            event_log.close()
            logger.info("Passthrough stopped")

    app = FastAPI(
        title="Passthrough",
        description="Transparent HTTP reverse proxy",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    @app.exception_handler(InvalidMethodError)
    async def invalid_method_handler(request: Request, exc: InvalidMethodError):
        logger.warning("Rejected request method", method=exc.method, path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content={"detail": str(exc)},
        )

    @app.exception_handler(UpstreamTransportError)
    async def upstream_error_handler(request: Request, exc: UpstreamTransportError):
        logger.error("Upstream unreachable", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )

    app.router.routes.append(proxy_route)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    print("🚀 Starting Passthrough proxy...")
    print(f"   Upstream: {settings.base_url}")
    print(f"   Host: {settings.api_host}")
    print(f"   Port: {settings.api_port}")
    print(f"   Log file: {settings.log_file}")

    uvicorn.run(
        "passthrough.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
