"""Tests for the phone verification code state machine."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from warranty_app.application.use_cases.phone_verification import (
    PhoneVerificationService,
    generate_verification_code,
)
from warranty_app.infrastructure.verification_store import InMemoryVerificationCodeStore

START = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
PHONE = "+15551234567"


class FakeClock:
    def __init__(self) -> None:
        self.now = START

    def __call__(self) -> datetime:
        return self.now


class FakeSmsSender:
    def __init__(self, delivered: bool = True, error: Exception | None = None) -> None:
        self.delivered = delivered
        self.error = error
        self.messages: list[tuple[str, str]] = []

    def send_sms(self, to: str, body: str) -> bool:
        self.messages.append((to, body))
        if self.error is not None:
            raise self.error
        return self.delivered


class SequentialCodes:
    def __init__(self, *codes: str) -> None:
        self._codes = list(codes)

    def __call__(self) -> str:
        return self._codes.pop(0)


@pytest.fixture
def store() -> InMemoryVerificationCodeStore:
    return InMemoryVerificationCodeStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def _service(store, clock, sms=None, codes=("123456",)) -> PhoneVerificationService:
    return PhoneVerificationService(
        store,
        sms or FakeSmsSender(),
        clock=clock,
        code_factory=SequentialCodes(*codes),
    )


def test_generated_codes_are_six_digits() -> None:
    for _ in range(50):
        code = generate_verification_code()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999


def test_send_stores_entry_and_texts_code(store, clock) -> None:
    sms = FakeSmsSender()
    service = _service(store, clock, sms)

    result = asyncio.run(service.send_verification_code("user-1", PHONE))

    assert result.success is True
    assert result.message == "Verification code sent successfully"
    entry = store.get("user-1")
    assert entry.code == "123456"
    assert entry.phone_number == PHONE
    assert entry.attempt_count == 0
    assert entry.expires_at == START + timedelta(minutes=5)
    assert sms.messages == [
        (PHONE, "Your warranty app verification code is: 123456. Valid for 5 minutes.")
    ]


def test_correct_code_verifies_once(store, clock) -> None:
    service = _service(store, clock)
    asyncio.run(service.send_verification_code("user-1", PHONE))

    first = service.verify_code("user-1", "123456")
    second = service.verify_code("user-1", "123456")

    assert first.success is True
    assert second.success is False
    assert len(store) == 0


def test_two_wrong_guesses_then_correct_succeeds(store, clock) -> None:
    service = _service(store, clock)
    asyncio.run(service.send_verification_code("user-1", PHONE))

    assert service.verify_code("user-1", "000000").message == "Invalid verification code"
    assert service.verify_code("user-1", "000001").success is False
    assert service.verify_code("user-1", "123456").success is True


def test_three_wrong_guesses_consume_the_code(store, clock) -> None:
    service = _service(store, clock)
    asyncio.run(service.send_verification_code("user-1", PHONE))

    results = [service.verify_code("user-1", guess) for guess in ("1", "2", "3")]
    after = service.verify_code("user-1", "123456")

    assert [result.success for result in results] == [False, False, False]
    assert after.success is False
    assert store.get("user-1") is None


def test_code_is_valid_until_expiry_instant(store, clock) -> None:
    service = _service(store, clock)
    asyncio.run(service.send_verification_code("user-1", PHONE))

    clock.now = START + timedelta(minutes=5)

    assert service.verify_code("user-1", "123456").success is True


def test_expired_code_is_rejected_and_removed(store, clock) -> None:
    service = _service(store, clock)
    asyncio.run(service.send_verification_code("user-1", PHONE))

    clock.now = START + timedelta(minutes=5, microseconds=1)
    result = service.verify_code("user-1", "123456")

    assert result.success is False
    assert result.message == "Verification code has expired"
    assert store.get("user-1") is None


def test_reissue_overwrites_code_and_resets_attempts(store, clock) -> None:
    service = _service(store, clock, codes=("111111", "222222"))
    asyncio.run(service.send_verification_code("user-1", PHONE))
    service.verify_code("user-1", "000000")
    service.verify_code("user-1", "000000")

    asyncio.run(service.send_verification_code("user-1", PHONE))

    entry = store.get("user-1")
    assert entry.code == "222222"
    assert entry.attempt_count == 0
    assert service.verify_code("user-1", "111111").success is False
    assert service.verify_code("user-1", "222222").success is True


def test_undelivered_sms_rolls_back_entry(store, clock) -> None:
    service = _service(store, clock, FakeSmsSender(delivered=False))

    result = asyncio.run(service.send_verification_code("user-1", PHONE))

    assert result.success is False
    assert result.message == (
        "Failed to send verification code. Please ensure SMS notifications are configured."
    )
    assert store.get("user-1") is None


def test_sms_error_rolls_back_entry(store, clock) -> None:
    service = _service(store, clock, FakeSmsSender(error=RuntimeError("twilio down")))

    result = asyncio.run(service.send_verification_code("user-1", PHONE))

    assert result.success is False
    assert result.message == "An error occurred while sending verification code"
    assert len(store) == 0


def test_users_are_independent(store, clock) -> None:
    service = _service(store, clock, codes=("111111", "222222"))
    asyncio.run(service.send_verification_code("user-1", PHONE))
    asyncio.run(service.send_verification_code("user-2", "+15557654321"))

    assert service.verify_code("user-1", "222222").success is False
    assert service.verify_code("user-2", "222222").success is True
    assert store.get("user-1") is not None


def test_concurrent_wrong_guesses_never_exceed_attempt_limit(store, clock) -> None:
    service = _service(store, clock)
    asyncio.run(service.send_verification_code("user-1", PHONE))

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(lambda guess: service.verify_code("user-1", guess), ["0"] * 16))

    assert not any(result.success for result in results)
    assert sum(result.message == "Invalid verification code" for result in results) == 2
    assert store.get("user-1") is None
