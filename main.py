import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from warranty_app.application.use_cases.phone_verification import PhoneVerificationService
from warranty_app.application.use_cases.warranties import (
    build_warranty_cache,
    build_warranty_monitor,
)
from warranty_app.config import get_settings
from warranty_app.infrastructure.database import engine, initialize_database
from warranty_app.infrastructure.sms import TwilioSmsSender
from warranty_app.infrastructure.verification_store import verification_code_store
from warranty_app.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare shared services, start the warranty monitor and stop it on shutdown."""

    settings = get_settings()
    initialize_database()

    warranty_cache = build_warranty_cache(settings)
    app.state.warranty_cache = warranty_cache
    app.state.phone_verification = PhoneVerificationService(
        verification_code_store, TwilioSmsSender(settings)
    )

    monitor = None
    if settings.warranty_monitor_enabled:
        monitor = build_warranty_monitor(settings, warranty_cache=warranty_cache)
        monitor.start()
    else:
        logger.info("Warranty expiration monitor disabled by configuration")
    app.state.warranty_monitor = monitor

    try:
        yield
    finally:
        if monitor is not None:
            await monitor.stop()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(lifespan=lifespan, title="Warranty Notifications API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:4200"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()
