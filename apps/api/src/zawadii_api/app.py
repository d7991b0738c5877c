from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from zawadii_api.core.errors import LoyaltyError
from zawadii_api.core.settings import settings
from zawadii_api.db.session import engine
from .api.routes import api_router
from .core.logging import configure_logging
from .observability.tracing import configure_tracing


APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Zawadii API starting",
        environment=settings.environment,
        sms_enabled=settings.sms_enabled,
        sms_configured=settings.sms_configured,
    )
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Zawadii API stopped")


async def handle_loyalty_error(request: Request, exc: LoyaltyError) -> JSONResponse:
    logger.info(
        "Request rejected",
        path=request.url.path,
        status_code=exc.status_code,
        error=exc.__class__.__name__,
        detail=exc.detail,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.as_payload())


def create_app() -> FastAPI:
    """Application factory for the Zawadii loyalty dashboard API."""
    configure_logging(
        service_name="zawadii-api",
        environment=settings.environment,
        version=APP_VERSION,
        level=settings.log_level,
    )

    app = FastAPI(
        title="Zawadii API",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if settings.cors_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    configure_tracing(
        app,
        service_name="zawadii-api",
        service_version=APP_VERSION,
        environment=settings.environment,
    )

    app.add_exception_handler(LoyaltyError, handle_loyalty_error)
    app.include_router(api_router)

    @app.get("/healthz", tags=["Health"])
    async def health_check() -> dict[str, str]:
        return {
            "status": "ok",
            "environment": settings.environment,
            "version": APP_VERSION,
        }

    return app
