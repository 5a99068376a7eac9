"""Tests for encryption, rate limiting and audit logging."""

import logging
from datetime import timedelta

import pytest
from cryptography.fernet import Fernet

from dynaform.security import (
    AuditEventType,
    AuditLogEntry,
    EncryptedFieldHelper,
    FernetEncryptionService,
    FormSecurity,
    InMemoryRateLimitService,
    LoggingAuditLogService,
)

from sample_models import Address, Customer


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestFernetEncryptionService:
    """Tests for FernetEncryptionService."""

    def test_round_trip_with_fernet_key(self):
        service = FernetEncryptionService(Fernet.generate_key())
        encrypted = service.encrypt("123-45-6789")
        assert encrypted != "123-45-6789"
        assert service.decrypt(encrypted) == "123-45-6789"

    def test_passphrase_key_is_derived(self):
        first = FernetEncryptionService("correct horse battery staple")
        second = FernetEncryptionService("correct horse battery staple")
        assert second.decrypt(first.encrypt("secret")) == "secret"

    def test_empty_values_pass_through(self):
        service = FernetEncryptionService("passphrase")
        assert service.encrypt(None) is None
        assert service.encrypt("") == ""
        assert service.decrypt("") == ""

    def test_undecryptable_value_is_returned(self):
        service = FernetEncryptionService("passphrase")
        assert service.decrypt("plain text") == "plain text"

    def test_wrong_key_returns_input(self):
        encrypted = FernetEncryptionService("one").encrypt("secret")
        assert FernetEncryptionService("two").decrypt(encrypted) == encrypted


class TestEncryptedFieldHelper:
    """Tests for EncryptedFieldHelper."""

    def test_encrypts_only_marked_fields(self):
        helper = EncryptedFieldHelper(FernetEncryptionService("passphrase"))
        security = FormSecurity(encrypted_fields={"email", "address.street"})
        customer = Customer(name="Ada", email="ada@example.com", address=Address(street="Main"))

        helper.encrypt_fields(customer, security)

        assert customer.name == "Ada"
        assert customer.email != "ada@example.com"
        assert customer.address.street != "Main"

        copy = helper.create_decrypted_copy(customer, security)
        assert copy.email == "ada@example.com"
        assert copy.address.street == "Main"
        assert customer.email != "ada@example.com"


class TestInMemoryRateLimitService:
    """Tests for the sliding-window rate limiter."""

    @pytest.mark.asyncio
    async def test_allows_until_limit(self):
        limiter = InMemoryRateLimitService(clock=FakeClock())
        window = timedelta(minutes=1)

        for expected_remaining in (3, 2, 1):
            result = await limiter.check_limit("ip", 3, window)
            assert result.is_allowed is True
            assert result.remaining_attempts == expected_remaining
            await limiter.record_attempt("ip")

        blocked = await limiter.check_limit("ip", 3, window)
        assert blocked.is_allowed is False
        assert blocked.remaining_attempts == 0

    @pytest.mark.asyncio
    async def test_retry_after_and_window_expiry(self):
        clock = FakeClock()
        limiter = InMemoryRateLimitService(clock=clock)
        window = timedelta(seconds=60)

        await limiter.record_attempt("ip")
        clock.advance(20)
        await limiter.record_attempt("ip")

        blocked = await limiter.check_limit("ip", 2, window)
        assert blocked.retry_after == timedelta(seconds=40)

        clock.advance(41)
        allowed = await limiter.check_limit("ip", 2, window)
        assert allowed.is_allowed is True
        assert allowed.remaining_attempts == 1

    @pytest.mark.asyncio
    async def test_identifiers_are_independent(self):
        limiter = InMemoryRateLimitService(clock=FakeClock())
        await limiter.record_attempt("a")
        result = await limiter.check_limit("b", 1, timedelta(minutes=1))
        assert result.is_allowed is True

    @pytest.mark.asyncio
    async def test_cleanup(self):
        clock = FakeClock()
        limiter = InMemoryRateLimitService(clock=clock)
        await limiter.record_attempt("old")
        clock.advance(7200)
        await limiter.record_attempt("new")
        assert limiter.cleanup() == 1


class TestLoggingAuditLogService:
    """Tests for the logging audit service."""

    @pytest.mark.asyncio
    async def test_info_event(self, caplog):
        caplog.set_level(logging.INFO, logger="dynaform.audit")
        await LoggingAuditLogService().log(
            AuditLogEntry(event_type=AuditEventType.FORM_SUBMITTED, form_id="Customer")
        )
        record = caplog.records[-1]
        assert record.levelno == logging.INFO
        assert record.getMessage().startswith("[AUDIT] form_submitted")
        assert '"form_id":"Customer"' in record.getMessage()

    @pytest.mark.asyncio
    async def test_warning_event(self, caplog):
        caplog.set_level(logging.INFO, logger="dynaform.audit")
        await LoggingAuditLogService().log(AuditLogEntry(event_type=AuditEventType.RATE_LIMIT_EXCEEDED))
        assert caplog.records[-1].levelno == logging.WARNING
