"""Security collaborators: encryption, rate limiting and audit logging."""

from dynaform.security.models import (
    AuditEventType,
    AuditLogConfiguration,
    AuditLogEntry,
    FormSecurity,
    RateLimitConfiguration,
    RateLimitResult,
)
from dynaform.security.encryption import EncryptedFieldHelper, EncryptionService, FernetEncryptionService
from dynaform.security.rate_limit import InMemoryRateLimitService, RateLimitService
from dynaform.security.audit import AuditLogService, LoggingAuditLogService

__all__ = [
    "AuditEventType",
    "AuditLogEntry",
    "AuditLogConfiguration",
    "RateLimitConfiguration",
    "RateLimitResult",
    "FormSecurity",
    "EncryptionService",
    "FernetEncryptionService",
    "EncryptedFieldHelper",
    "RateLimitService",
    "InMemoryRateLimitService",
    "AuditLogService",
    "LoggingAuditLogService",
]
