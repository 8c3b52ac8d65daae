# 📄 File: harvest_hub/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts Harvest Hub, connects it to the hosted database and
# image storage, and wires up every part of the app so it is ready for requests.
#
# 🧪 Purpose (Technical Summary):
# FastAPI application factory and entry point: middleware setup, exception handlers that
# render the API error envelope, router registration, and a lifespan that builds the
# Supabase-backed data client and media store unless instances are injected.
#
# 🔗 Dependencies:
# - FastAPI framework, uvicorn
# - harvest_hub.shared.config (settings, Supabase manager)
# - harvest_hub.shared.infrastructure (data client, media store)
# - harvest_hub.api (routers, middleware)
#
# 🔄 Connected Modules / Calls From:
# - uvicorn server startup
# - Test suite (create_application with in-memory clients)

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from harvest_hub.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from harvest_hub.api.router import api_router
from harvest_hub.shared.config.settings import Settings, get_settings
from harvest_hub.shared.config.supabase import SupabaseManager
from harvest_hub.shared.core.exceptions import HarvestHubException
from harvest_hub.shared.core.rate_limiter import create_limiter, parse_auth_limit
from harvest_hub.shared.core.security import SecurityManager
from harvest_hub.shared.infrastructure.database.client import DataClient, SupabaseDataClient
from harvest_hub.shared.infrastructure.storage.supabase_storage import MediaStore, SupabaseMediaStore
from harvest_hub.shared.utils.logging import log_shutdown_event, log_startup_event, setup_logging

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Human readable message built from the first pydantic error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request data"

    first = errors[0]
    message = str(first.get("msg", "Invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    return f"{'.'.join(location)}: {message}" if location else message


def _build_lifespan(data_client: Optional[DataClient], media_store: Optional[MediaStore]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        Application lifespan context manager.

        Connects the Supabase client and builds the store adapters unless
        both were supplied to create_application.
        """
        settings: Settings = app.state.settings
        log_startup_event(settings.APP_NAME, settings.APP_VERSION, {"environment": settings.ENVIRONMENT})

        manager: Optional[SupabaseManager] = None
        if data_client is None or media_store is None:
            manager = SupabaseManager(settings)
            try:
                client = await manager.connect()
            except ConnectionError as e:
                logger.error(f"❌ Startup failed: {e}")
                raise

            if app.state.data_client is None:
                app.state.data_client = SupabaseDataClient(client)
                logger.info("✅ Data client initialized")
            if app.state.media_store is None:
                app.state.media_store = SupabaseMediaStore(client, settings)
                logger.info("✅ Media store initialized")

        logger.info(f"🌱 {settings.APP_NAME} startup complete")
        try:
            yield
        finally:
            if manager is not None:
                manager.close()
            log_shutdown_event(settings.APP_NAME)

    return lifespan


def create_application(
    settings: Optional[Settings] = None,
    data_client: Optional[DataClient] = None,
    media_store: Optional[MediaStore] = None,
) -> FastAPI:
    """
    Application factory function.

    Args:
        settings: Settings to use, defaults to the cached environment settings
        data_client: Pre-built data-access client; built from Supabase when omitted
        media_store: Pre-built media store; built from Supabase when omitted

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=_build_lifespan(data_client, media_store),
        debug=settings.DEBUG,
    )

    # Explicitly constructed services, read by the route dependencies
    app.state.settings = settings
    app.state.security = SecurityManager(settings)
    app.state.data_client = data_client
    app.state.media_store = media_store
    app.state.limiter = create_limiter(settings)
    app.state.auth_rate_limit = parse_auth_limit(settings)

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # Error handling middleware (innermost, catches what the handlers do not)
    app.add_middleware(ErrorHandlingMiddleware, settings=settings)

    # Request logging middleware
    if not settings.is_testing:
        app.add_middleware(RequestLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # ROUTER REGISTRATION
    # =========================================================================

    app.include_router(api_router)

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(HarvestHubException)
    async def harvest_hub_exception_handler(request: Request, exc: HarvestHubException) -> JSONResponse:
        """Handle custom Harvest Hub application exceptions."""
        if exc.status_code >= 500:
            logger.error(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Request bodies that fail schema validation are reported as 400."""
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": _validation_message(exc),
                "code": "VALIDATION_ERROR",
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Unknown routes and other framework HTTP errors in the API envelope."""
        if exc.status_code == 404:
            message, code = "Route not found", "ROUTE_NOT_FOUND"
        else:
            message, code = str(exc.detail), f"HTTP_{exc.status_code}"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": message, "code": code},
            headers=getattr(exc, "headers", None),
        )

    return app


# Create the FastAPI application
app = create_application()


def main():
    """
    Run the application with uvicorn.

    Used when running `python -m harvest_hub.main` or the `harvest-hub`
    console script.
    """
    settings = get_settings()
    uvicorn.run(
        "harvest_hub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD and settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
        workers=1 if settings.RELOAD else settings.WORKERS,
    )


if __name__ == "__main__":
    main()
