"""
Field encryption.

``FernetEncryptionService`` encrypts string values with Fernet. Missing
values pass through untouched and values that cannot be decrypted are
returned as they are.
"""

import base64
import binascii
import copy
import logging
from typing import Any, Protocol, runtime_checkable

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from dynaform.config import get_config
from dynaform.core.accessor import PropertyAccessor
from dynaform.security.models import FormSecurity

logger = logging.getLogger("dynaform.security")


@runtime_checkable
class EncryptionService(Protocol):
    def encrypt(self, value: str | None) -> str | None:
        ...

    def decrypt(self, value: str | None) -> str | None:
        ...


class FernetEncryptionService:
    """
    Fernet-based encryption.

    Args:
        key: A Fernet key, or any passphrase (derived with PBKDF2).
            Defaults to config.encryption_key; without one a random key
            is generated, which only suits development.
    """

    _salt = b"dynaform-field-encryption"

    def __init__(self, key: str | bytes | None = None):
        material = key if key is not None else get_config().encryption_key
        if material is None:
            logger.warning("Using generated encryption key - not suitable for production")
            fernet_key = Fernet.generate_key()
        else:
            fernet_key = self._to_fernet_key(material)
        self._fernet = Fernet(fernet_key)

    def _to_fernet_key(self, material: str | bytes) -> bytes:
        raw = material.encode() if isinstance(material, str) else material
        try:
            if len(base64.urlsafe_b64decode(raw)) == 32:
                return raw
        except (binascii.Error, ValueError):
            pass

        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self._salt,
            iterations=100_000,
        )
        return base64.urlsafe_b64encode(kdf.derive(raw))

    def encrypt(self, value: str | None) -> str | None:
        if not value:
            return value
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, value: str | None) -> str | None:
        if not value:
            return value
        try:
            return self._fernet.decrypt(value.encode()).decode()
        except (InvalidToken, ValueError) as e:
            logger.warning(f"Decryption failed, returning value unchanged: {type(e).__name__}")
            return value


class EncryptedFieldHelper:
    """Encrypts and decrypts the string fields a form marks as encrypted."""

    def __init__(self, encryption_service: EncryptionService):
        self.encryption_service = encryption_service

    def _accessors(self, model: Any, security: FormSecurity) -> list[PropertyAccessor]:
        return [PropertyAccessor(type(model), path) for path in sorted(security.encrypted_fields)]

    def encrypt_fields(self, model: Any, security: FormSecurity) -> Any:
        for accessor in self._accessors(model, security):
            value = accessor.get(model)
            if isinstance(value, str):
                accessor.set(model, self.encryption_service.encrypt(value))
        return model

    def decrypt_fields(self, model: Any, security: FormSecurity) -> Any:
        for accessor in self._accessors(model, security):
            value = accessor.get(model)
            if isinstance(value, str):
                accessor.set(model, self.encryption_service.decrypt(value))
        return model

    def create_decrypted_copy(self, model: Any, security: FormSecurity) -> Any:
        return self.decrypt_fields(copy.deepcopy(model), security)
