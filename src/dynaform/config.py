"""
Configuration module for dynaform.

Handles environment variables and default settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class EngineConfig:
    """Configuration settings for dynaform."""

    # LOV settings
    lov_page_size: int = 50
    lov_debounce_ms: int = 300

    # Dependency graph settings
    max_dependency_depth: int = 16

    # Validation settings
    validate_hidden_fields: bool = True

    # Logging settings
    log_level: str = "INFO"
    audit_logger_name: str = "dynaform.audit"

    # Security settings
    encryption_key: str | None = None

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            lov_page_size=int(os.getenv("DYNAFORM_LOV_PAGE_SIZE", str(_defaults.lov_page_size))),
            lov_debounce_ms=int(os.getenv("DYNAFORM_LOV_DEBOUNCE_MS", str(_defaults.lov_debounce_ms))),
            max_dependency_depth=int(
                os.getenv("DYNAFORM_MAX_DEPENDENCY_DEPTH", str(_defaults.max_dependency_depth))
            ),
            validate_hidden_fields=os.getenv(
                "DYNAFORM_VALIDATE_HIDDEN_FIELDS", str(_defaults.validate_hidden_fields).lower()
            ).lower() == "true",
            log_level=os.getenv("DYNAFORM_LOG_LEVEL", _defaults.log_level),
            audit_logger_name=os.getenv("DYNAFORM_AUDIT_LOGGER", _defaults.audit_logger_name),
            encryption_key=os.getenv("DYNAFORM_ENCRYPTION_KEY", _defaults.encryption_key),
        )


config = EngineConfig.from_env()


def get_config() -> EngineConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> EngineConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
