from fastapi import FastAPI

from .health import router as health_router
from .phone_verification import router as phone_verification_router
from .warranty_notifications import router as warranty_notifications_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(health_router)
    app.include_router(phone_verification_router)
    app.include_router(warranty_notifications_router)
