"""Issue and check short-lived phone verification codes."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta
from functools import partial

from anyio import to_thread

from warranty_app.application.use_cases.warranties.dispatch import SmsSender
from warranty_app.domain.entities import VerificationCodeEntry, VerificationResult
from warranty_app.infrastructure.sms import build_verification_code_sms
from warranty_app.infrastructure.verification_store import VerificationCodeStore
from warranty_app.utils import mask_phone_number, now_utc

logger = logging.getLogger(__name__)

CODE_TTL = timedelta(minutes=5)
MAX_ATTEMPTS = 3

CODE_SENT_MESSAGE = "Verification code sent successfully"
DELIVERY_FAILED_MESSAGE = (
    "Failed to send verification code. Please ensure SMS notifications are configured."
)
DELIVERY_ERROR_MESSAGE = "An error occurred while sending verification code"
VERIFIED_MESSAGE = "Phone number verified successfully"
NO_CODE_MESSAGE = "No verification code was requested or it was already used"
EXPIRED_MESSAGE = "Verification code has expired"
ATTEMPTS_EXHAUSTED_MESSAGE = "Too many failed attempts; request a new code"
INVALID_CODE_MESSAGE = "Invalid verification code"


def generate_verification_code() -> str:
    """Return a uniformly random six digit code."""

    return str(100000 + secrets.randbelow(900000))


class PhoneVerificationService:
    """Per-user verification code state machine.

    One code is outstanding per user. A correct code consumes it at once;
    wrong guesses are allowed until ``MAX_ATTEMPTS`` have been spent.
    """

    def __init__(
        self,
        store: VerificationCodeStore,
        sms_sender: SmsSender,
        *,
        clock: Callable[[], datetime] = now_utc,
        code_factory: Callable[[], str] = generate_verification_code,
    ) -> None:
        self._store = store
        self._sms_sender = sms_sender
        self._clock = clock
        self._code_factory = code_factory

    async def send_verification_code(
        self, user_id: str, phone_number: str
    ) -> VerificationResult:
        """Issue a fresh code for ``user_id`` and text it to ``phone_number``."""

        entry = VerificationCodeEntry(
            code=self._code_factory(),
            phone_number=phone_number,
            expires_at=self._clock() + CODE_TTL,
            attempt_count=0,
        )
        self._store.put(user_id, entry)

        message = build_verification_code_sms(
            entry.code, valid_minutes=int(CODE_TTL.total_seconds() // 60)
        )
        try:
            delivered = await to_thread.run_sync(
                partial(self._sms_sender.send_sms, phone_number, message)
            )
        except Exception:
            self._rollback(user_id, entry)
            logger.exception("Error sending verification code for user %s", user_id)
            return VerificationResult(False, DELIVERY_ERROR_MESSAGE)

        if not delivered:
            self._rollback(user_id, entry)
            logger.warning("Failed to send verification code to user %s", user_id)
            return VerificationResult(False, DELIVERY_FAILED_MESSAGE)

        logger.info(
            "Verification code sent to user %s at %s",
            user_id,
            mask_phone_number(phone_number),
        )
        return VerificationResult(True, CODE_SENT_MESSAGE)

    def verify_code(self, user_id: str, code: str) -> VerificationResult:
        """Check ``code`` against the outstanding entry of ``user_id``.

        The whole check runs under the user's lock so concurrent guesses
        cannot both observe the same attempt count.
        """

        with self._store.locked(user_id) as handle:
            entry = handle.get()
            if entry is None:
                logger.warning("No verification code found for user %s", user_id)
                return VerificationResult(False, NO_CODE_MESSAGE)

            if entry.is_expired(self._clock()):
                handle.remove()
                logger.warning("Verification code expired for user %s", user_id)
                return VerificationResult(False, EXPIRED_MESSAGE)

            if entry.attempt_count >= MAX_ATTEMPTS:
                handle.remove()
                logger.warning("Max verification attempts exceeded for user %s", user_id)
                return VerificationResult(False, ATTEMPTS_EXHAUSTED_MESSAGE)

            entry.attempt_count += 1

            if entry.code == code:
                handle.remove()
                logger.info("Phone number verified successfully for user %s", user_id)
                return VerificationResult(True, VERIFIED_MESSAGE)

            logger.warning(
                "Invalid verification code for user %s. Attempt %s/%s",
                user_id,
                entry.attempt_count,
                MAX_ATTEMPTS,
            )
            if entry.attempt_count >= MAX_ATTEMPTS:
                handle.remove()
                return VerificationResult(False, ATTEMPTS_EXHAUSTED_MESSAGE)
            handle.put(entry)
            return VerificationResult(False, INVALID_CODE_MESSAGE)

    def _rollback(self, user_id: str, entry: VerificationCodeEntry) -> None:
        # A newer code issued meanwhile must survive.
        with self._store.locked(user_id) as handle:
            if handle.get() is entry:
                handle.remove()


__all__ = [
    "CODE_TTL",
    "MAX_ATTEMPTS",
    "PhoneVerificationService",
    "generate_verification_code",
]
