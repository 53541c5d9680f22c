"""Health endpoint describing the notification transports."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from warranty_app.application.use_cases.warranties import WarrantyExpirationMonitor
from warranty_app.config import Settings, get_settings
from warranty_app.interfaces.api.dependencies import get_warranty_monitor
from warranty_app.interfaces.api.schemas import ComponentHealth, HealthRead

router = APIRouter(tags=["health"])

_SEVERITY = {"healthy": 0, "degraded": 1, "unhealthy": 2}


def _email_health(settings: Settings) -> ComponentHealth:
    if settings.notification_backend == "log":
        return ComponentHealth(status="healthy", description="Notifications are logged only.")
    if settings.sendgrid_configured:
        return ComponentHealth(status="healthy", description="SendGrid is configured.")
    return ComponentHealth(status="unhealthy", description="SendGrid credentials not configured.")


def _sms_health(settings: Settings) -> ComponentHealth:
    if settings.twilio_configured:
        return ComponentHealth(status="healthy", description="Twilio is configured.")
    return ComponentHealth(
        status="degraded",
        description="Twilio credentials not configured. SMS features will not work.",
    )


def _monitor_health(monitor: WarrantyExpirationMonitor | None) -> ComponentHealth:
    if monitor is None:
        return ComponentHealth(status="degraded", description="Warranty monitor is disabled.")
    if monitor.running:
        return ComponentHealth(status="healthy", description="Warranty monitor is running.")
    return ComponentHealth(status="unhealthy", description="Warranty monitor is not running.")


@router.get("/health", response_model=HealthRead)
def health(
    monitor: WarrantyExpirationMonitor | None = Depends(get_warranty_monitor),
) -> HealthRead:
    """Report which delivery channels and background jobs are usable."""

    settings = get_settings()
    components = {
        "email": _email_health(settings),
        "sms": _sms_health(settings),
        "warranty_monitor": _monitor_health(monitor),
    }
    overall = max(components.values(), key=lambda item: _SEVERITY[item.status]).status
    return HealthRead(status=overall, components=components)
