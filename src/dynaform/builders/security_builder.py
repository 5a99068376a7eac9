"""
Security settings builder.
"""

from datetime import timedelta

from dynaform.core.accessor import PropertyAccessor
from dynaform.security.models import (
    AuditLogConfiguration,
    FormSecurity,
    RateLimitConfiguration,
)


class SecurityBuilder:
    """
    Builds a ``FormSecurity``.

    Usage:
        form.with_security(lambda s: (
            s.encrypt_field("ssn")
             .with_rate_limit(5, timedelta(minutes=1))
             .enable_audit_logging(excluded_fields={"password"})
        ))
    """

    def __init__(self, model_type: type):
        self.model_type = model_type
        self._security = FormSecurity()

    def encrypt_field(self, path: str) -> "SecurityBuilder":
        PropertyAccessor(self.model_type, path)  # fails fast on unknown paths
        self._security.encrypted_fields.add(path)
        return self

    def enable_csrf_protection(self, token_name: str | None = None) -> "SecurityBuilder":
        self._security.enable_csrf = True
        if token_name:
            self._security.csrf_token_name = token_name
        return self

    def with_rate_limit(
        self,
        max_attempts: int,
        time_window: timedelta,
        identifier_type: str = "ip",
    ) -> "SecurityBuilder":
        self._security.rate_limit = RateLimitConfiguration(
            max_attempts=max_attempts,
            time_window=time_window,
            identifier_type=identifier_type,
        )
        return self

    def enable_audit_logging(
        self,
        log_field_changes: bool = True,
        log_validation_errors: bool = True,
        log_submissions: bool = True,
        excluded_fields: set[str] | None = None,
    ) -> "SecurityBuilder":
        self._security.audit_log = AuditLogConfiguration(
            log_field_changes=log_field_changes,
            log_validation_errors=log_validation_errors,
            log_submissions=log_submissions,
            excluded_fields=set(excluded_fields or ()),
        )
        return self

    def build(self) -> FormSecurity:
        return self._security
