"""
Security settings and audit models.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    FIELD_CHANGED = "field_changed"
    VALIDATION_ERROR = "validation_error"
    FORM_SUBMITTED = "form_submitted"
    FORM_LOADED = "form_loaded"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    CSRF_VALIDATION_FAILED = "csrf_validation_failed"


class AuditLogEntry(BaseModel):
    """One audit record."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="Entry identifier")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="When the event happened"
    )
    event_type: AuditEventType = Field(..., description="Kind of event")
    form_id: str | None = Field(default=None, description="Form the event belongs to")
    user_id: str | None = Field(default=None, description="Acting user")
    ip_address: str | None = Field(default=None, description="Client address")
    field_name: str | None = Field(default=None, description="Field involved, if any")
    old_value: str | None = Field(default=None, description="Value before the change")
    new_value: str | None = Field(default=None, description="Value after the change")
    additional_data: dict[str, Any] = Field(default_factory=dict, description="Free-form details")


@dataclass(frozen=True)
class RateLimitResult:
    is_allowed: bool
    remaining_attempts: int
    retry_after: timedelta | None = None


@dataclass
class RateLimitConfiguration:
    max_attempts: int = 5
    time_window: timedelta = timedelta(minutes=1)
    identifier_type: str = "ip"


@dataclass
class AuditLogConfiguration:
    log_field_changes: bool = True
    log_validation_errors: bool = True
    log_submissions: bool = True
    excluded_fields: set[str] = field(default_factory=set)


@dataclass
class FormSecurity:
    """Security settings attached to a form configuration."""

    encrypted_fields: set[str] = field(default_factory=set)
    enable_csrf: bool = False
    csrf_token_name: str = "__RequestVerificationToken"
    rate_limit: RateLimitConfiguration | None = None
    audit_log: AuditLogConfiguration | None = None

    def is_audited(self, field_name: str) -> bool:
        return self.audit_log is not None and field_name not in self.audit_log.excluded_fields
