"""
Form session.

This is the runtime entry point for dynaform. A session binds one form
configuration to one model instance: it commits values, fires
dependencies, keeps per-field errors, renders fields, hands out LOV
controllers and runs submissions.
"""

import copy
import hmac
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from dynaform.constants import ATTR_LOV_CONFIGURATION
from dynaform.core.erasure import ErasedField
from dynaform.core.form import FormConfiguration
from dynaform.errors import FormConfigurationError
from dynaform.lov.controller import LovController
from dynaform.models.render_output import RenderedField
from dynaform.models.validation_result import FormValidationResult
from dynaform.rendering.dispatcher import RenderDispatcher
from dynaform.security.audit import AuditLogService, LoggingAuditLogService
from dynaform.security.encryption import EncryptedFieldHelper, EncryptionService
from dynaform.security.models import AuditEventType, AuditLogEntry, RateLimitResult
from dynaform.security.rate_limit import InMemoryRateLimitService, RateLimitService
from dynaform.services import ServiceRegistry
from dynaform.tracing import traced_operation
from dynaform.validation.pipeline import ValidationPipeline

logger = logging.getLogger("dynaform.session")


@dataclass
class SubmissionResult:
    """Outcome of ``FormSession.submit``."""

    is_success: bool
    validation: FormValidationResult | None = None
    rate_limit: RateLimitResult | None = None
    message: str | None = None
    data: Any = None
    errors: dict[str, list[str]] = field(default_factory=dict)


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


class FormSession:
    """
    Edits one model with one form configuration.

    Usage:
        session = FormSession(form, Customer())

        errors = await session.set_value("name", "Ada")
        for rendered in session.render():
            print(rendered.widget, rendered.label, rendered.value)

        countries = session.lov("country_code")
        page = await countries.open()
        await countries.select([page.items[0]])

        result = await session.submit(identifier="10.0.0.1")
    """

    def __init__(
        self,
        configuration: FormConfiguration,
        model: Any,
        services: ServiceRegistry | None = None,
        dispatcher: RenderDispatcher | None = None,
        pipeline: ValidationPipeline | None = None,
        form_id: str | None = None,
        user_id: str | None = None,
        ip_address: str | None = None,
        on_field_changed: Callable[[str, Any], Any] | None = None,
        on_error: Callable[[str], Any] | None = None,
    ):
        """
        Initialize the session.

        Args:
            configuration: The built form.
            model: The model instance to edit in place.
            services: Registry for rule sets, renderers, LOV services and
                security services. Missing security services fall back to
                the in-memory and logging defaults.
            dispatcher: Render dispatcher. Defaults to the built-in renderers.
            pipeline: Validation pipeline. Defaults to config settings.
            form_id: Identifier recorded in audit entries.
            user_id: Acting user recorded in audit entries.
            ip_address: Client address for audit entries and rate limiting.
            on_field_changed: ``callback(field_name, value)`` after each commit.
            on_error: ``callback(message)`` for LOV loading errors.
        """
        self.configuration = configuration
        self.model = model
        self.services = services or ServiceRegistry()
        self.dispatcher = dispatcher or RenderDispatcher(services=self.services)
        self.pipeline = pipeline or ValidationPipeline()
        self.form_id = form_id or configuration.model_type.__name__
        self.user_id = user_id
        self.ip_address = ip_address
        self.on_field_changed = on_field_changed
        self.on_error = on_error

        self.errors: dict[str, list[str]] = {}
        self._controllers: dict[str, LovController] = {}

        self.audit_log: AuditLogService = self.services.get(AuditLogService) or LoggingAuditLogService()
        self.rate_limiter: RateLimitService = self.services.get(RateLimitService) or InMemoryRateLimitService()
        self.encryption: EncryptionService | None = self.services.get(EncryptionService)

    # Fields

    def get_field(self, field_name: str) -> ErasedField:
        field = self.configuration.get_field(field_name)
        if field is None:
            raise FormConfigurationError(
                f"Unknown field '{field_name}' on {self.configuration.model_type.__name__}"
            )
        return field

    async def set_value(self, field_name: str, value: Any) -> list[str]:
        """
        Commit a value.

        Converts and writes the value, fires the field's dependencies if
        the value changed, revalidates the field and returns its messages.
        """
        field = self.get_field(field_name)
        old_value = field.get_value(self.model)
        field.set_value(self.model, value)
        return await self._committed(field_name, old_value, field.get_value(self.model))

    async def _committed(self, field_name: str, old_value: Any, new_value: Any) -> list[str]:
        """Shared tail of every commit, whether typed in or picked from a LOV."""
        if new_value != old_value:
            await self.configuration.dependency_graph.notify(field_name, self.model)
            await self._audit_field_change(field_name, old_value, new_value)

        errors = await self.validate_field(field_name)

        if self.on_field_changed is not None:
            result = self.on_field_changed(field_name, new_value)
            if inspect.isawaitable(result):
                await result
        return errors

    async def notify_dependency_changed(self, field_name: str) -> None:
        """Fire ``field_name``'s dependencies without a new value, then revalidate it."""
        await self.configuration.dependency_graph.notify(field_name, self.model)
        await self.validate_field(field_name)

    # Validation

    async def validate_field(self, field_name: str) -> list[str]:
        field = self.get_field(field_name)
        errors = await self.pipeline.validate_field(self.model, field, self.services)
        messages = [e.message for e in errors if e.message]
        if errors:
            self.errors[field_name] = messages
        else:
            self.errors.pop(field_name, None)
        return messages

    async def validate(self) -> FormValidationResult:
        async with traced_operation("form_validation", {"form": self.form_id}):
            result = await self.pipeline.validate(self.model, self.configuration, self.services)

        self.errors = result.to_error_dict()
        security = self.configuration.security
        if not result.is_valid and security and security.audit_log and security.audit_log.log_validation_errors:
            await self._audit(
                AuditEventType.VALIDATION_ERROR,
                additional_data={"errors": self.errors, "error_count": result.error_count},
            )
        return result

    # Rendering

    def render_field(self, field_name: str) -> RenderedField:
        field = self.get_field(field_name)

        async def on_value_changed(value: Any) -> None:
            await self.set_value(field_name, value)

        async def on_dependency_changed() -> None:
            await self.notify_dependency_changed(field_name)

        return self.dispatcher.render(
            self.model,
            field,
            on_value_changed=on_value_changed,
            on_dependency_changed=on_dependency_changed,
            errors=self.errors.get(field_name),
        )

    def render(self) -> list[RenderedField]:
        """Visible fields in order, followed by visible collection fields."""
        rendered = [self.render_field(f.field_name) for f in self.configuration.get_visible_fields(self.model)]
        rendered.extend(
            self.dispatcher.render_collection(self.model, c)
            for c in self.configuration.collection_fields
            if c.is_visible
        )
        return rendered

    # LOV

    def lov(self, field_name: str) -> LovController:
        """The LOV controller for ``field_name``; one per field per session."""
        controller = self._controllers.get(field_name)
        if controller is not None:
            return controller

        field = self.get_field(field_name)
        lov_configuration = field.additional_attributes.get(ATTR_LOV_CONFIGURATION)
        if lov_configuration is None:
            raise FormConfigurationError(f"Field '{field_name}' is not a LOV field")

        async def on_value_changed(old_value: Any, new_value: Any) -> None:
            await self._committed(field_name, old_value, new_value)

        controller = LovController(
            self.model,
            field,
            lov_configuration,
            services=self.services,
            on_value_changed=on_value_changed,
            on_error=self.on_error,
        )
        self._controllers[field_name] = controller
        return controller

    # Lifecycle

    async def load(self) -> None:
        """Decrypt encrypted fields in place and record a form-loaded audit entry."""
        security = self.configuration.security
        if security and security.encrypted_fields and self.encryption is not None:
            EncryptedFieldHelper(self.encryption).decrypt_fields(self.model, security)
        await self._audit(AuditEventType.FORM_LOADED)

    async def submit(
        self,
        identifier: str | None = None,
        csrf_token: str | None = None,
        expected_csrf_token: str | None = None,
    ) -> SubmissionResult:
        """
        Validate and submit the model.

        Checks the CSRF token and the rate limit (check, then record) when
        the form's security settings ask for them. On success ``data`` is a
        copy of the model with encrypted fields encrypted.
        """
        security = self.configuration.security

        if security and security.enable_csrf:
            if not csrf_token or not expected_csrf_token or not hmac.compare_digest(csrf_token, expected_csrf_token):
                await self._audit(AuditEventType.CSRF_VALIDATION_FAILED)
                return SubmissionResult(is_success=False, message="Invalid security token")

        rate_limit = None
        if security and security.rate_limit:
            key = identifier or self.ip_address or self.user_id or "anonymous"
            rate_limit = await self.rate_limiter.check_limit(
                key, security.rate_limit.max_attempts, security.rate_limit.time_window
            )
            if not rate_limit.is_allowed:
                await self._audit(
                    AuditEventType.RATE_LIMIT_EXCEEDED,
                    additional_data={"identifier": key, "retry_after": str(rate_limit.retry_after)},
                )
                return SubmissionResult(
                    is_success=False,
                    rate_limit=rate_limit,
                    message=f"Too many attempts. Please try again in {rate_limit.retry_after}",
                )
            await self.rate_limiter.record_attempt(key)

        validation = await self.validate()
        if not validation.is_valid:
            return SubmissionResult(
                is_success=False,
                validation=validation,
                rate_limit=rate_limit,
                message="Please correct the errors below",
                errors=validation.to_error_dict(),
            )

        data = copy.deepcopy(self.model)
        if security and security.encrypted_fields and self.encryption is not None:
            EncryptedFieldHelper(self.encryption).encrypt_fields(data, security)

        if security and security.audit_log and security.audit_log.log_submissions:
            await self._audit(AuditEventType.FORM_SUBMITTED)

        logger.info(f"Form {self.form_id} submitted")
        return SubmissionResult(is_success=True, validation=validation, rate_limit=rate_limit, data=data)

    # Audit

    async def _audit_field_change(self, field_name: str, old_value: Any, new_value: Any) -> None:
        security = self.configuration.security
        if not security or not security.audit_log or not security.audit_log.log_field_changes:
            return
        if not security.is_audited(field_name):
            return
        if field_name in security.encrypted_fields:
            old_value = new_value = "***"
        await self._audit(
            AuditEventType.FIELD_CHANGED,
            field_name=field_name,
            old_value=_text(old_value),
            new_value=_text(new_value),
        )

    async def _audit(self, event_type: AuditEventType, **kwargs: Any) -> None:
        security = self.configuration.security
        if security is None or security.audit_log is None:
            return
        await self.audit_log.log(
            AuditLogEntry(
                event_type=event_type,
                form_id=self.form_id,
                user_id=self.user_id,
                ip_address=self.ip_address,
                **kwargs,
            )
        )
