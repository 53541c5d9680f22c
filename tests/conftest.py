"""Shared pytest configuration.

Environment variables are set before any ``warranty_app`` module is imported
because the settings and the database engine are created at import time.
"""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from jose import jwt

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "warranty_app_test.db"

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_PATH}")
os.environ.setdefault("WARRANTY_MONITOR_ENABLED", "false")
os.environ.setdefault("NOTIFICATION_BACKEND", "log")
for name in (
    "SENDGRID_API_KEY",
    "SENDGRID_SENDER",
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_FROM_NUMBER",
):
    os.environ.pop(name, None)

from warranty_app.config import get_settings  # noqa: E402
from warranty_app.infrastructure.security import ALGORITHM  # noqa: E402


@pytest.fixture
def issue_token():
    """Return a helper minting bearer tokens the way the identity service does."""

    def _issue(claims: dict, expires_in: timedelta = timedelta(minutes=30)) -> str:
        expire = datetime.now(tz=timezone.utc) + expires_in
        return jwt.encode({**claims, "exp": expire}, get_settings().secret_key, algorithm=ALGORITHM)

    return _issue


@pytest.fixture
def auth_headers(issue_token):
    """Return a helper building the ``Authorization`` header for a user id."""

    def _headers(user_id: str = "user-1") -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token({'sub': user_id})}"}

    return _headers
