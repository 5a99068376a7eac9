"""
Audit logging.
"""

import logging
from typing import Protocol, runtime_checkable

from dynaform.config import get_config
from dynaform.security.models import AuditEventType, AuditLogEntry

_WARNING_EVENTS = {
    AuditEventType.VALIDATION_ERROR,
    AuditEventType.RATE_LIMIT_EXCEEDED,
    AuditEventType.CSRF_VALIDATION_FAILED,
}


@runtime_checkable
class AuditLogService(Protocol):
    async def log(self, entry: AuditLogEntry) -> None:
        ...


class LoggingAuditLogService:
    """Writes audit entries as JSON to a logger (``dynaform.audit`` by default)."""

    def __init__(self, logger_name: str | None = None):
        self.logger = logging.getLogger(logger_name or get_config().audit_logger_name)

    async def log(self, entry: AuditLogEntry) -> None:
        level = logging.WARNING if entry.event_type in _WARNING_EVENTS else logging.INFO
        self.logger.log(level, f"[AUDIT] {entry.event_type.value}: {entry.model_dump_json(exclude_none=True)}")
