from .health import ComponentHealth, HealthRead
from .phone_verification import (
    SendVerificationCodeRequest,
    VerificationResponse,
    VerifyCodeRequest,
)
from .warranty_notification import (
    WarrantyCheckRead,
    WarrantyNotificationCount,
    WarrantyNotificationRead,
)

__all__ = [
    "ComponentHealth",
    "HealthRead",
    "SendVerificationCodeRequest",
    "VerificationResponse",
    "VerifyCodeRequest",
    "WarrantyCheckRead",
    "WarrantyNotificationCount",
    "WarrantyNotificationRead",
]
