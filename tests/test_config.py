"""Tests for configuration, the service registry and logging helpers."""

import logging

import pytest

from dynaform import config as config_module
from dynaform.config import EngineConfig, get_config, update_config
from dynaform.services import ServiceRegistry
from dynaform.tracing import LOGGER_NAME, disable_logging, enable_logging, traced_operation


class TestEngineConfig:
    """Tests for EngineConfig."""

    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.lov_page_size == 50
        assert cfg.lov_debounce_ms == 300
        assert cfg.max_dependency_depth == 16
        assert cfg.validate_hidden_fields is True
        assert cfg.encryption_key is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DYNAFORM_LOV_PAGE_SIZE", "25")
        monkeypatch.setenv("DYNAFORM_MAX_DEPENDENCY_DEPTH", "4")
        monkeypatch.setenv("DYNAFORM_VALIDATE_HIDDEN_FIELDS", "false")
        monkeypatch.setenv("DYNAFORM_ENCRYPTION_KEY", "secret")

        cfg = EngineConfig.from_env()

        assert cfg.lov_page_size == 25
        assert cfg.max_dependency_depth == 4
        assert cfg.validate_hidden_fields is False
        assert cfg.encryption_key == "secret"
        assert cfg.lov_debounce_ms == 300

    def test_update_config(self, monkeypatch):
        monkeypatch.setattr(config_module, "config", EngineConfig())

        updated = update_config(lov_page_size=10, unknown_setting=1)

        assert updated is get_config()
        assert get_config().lov_page_size == 10
        assert not hasattr(get_config(), "unknown_setting")


class TestServiceRegistry:
    """Tests for ServiceRegistry."""

    def test_register_and_get(self):
        services = ServiceRegistry().register("countries", ["FR"])
        assert services.get("countries") == ["FR"]
        assert "countries" in services
        assert services.get("states") is None

    def test_factory_called_per_lookup(self):
        services = ServiceRegistry().register_factory(list, list)
        assert services.get(list) is not services.get(list)

    def test_require(self):
        with pytest.raises(KeyError):
            ServiceRegistry().require("missing")


class TestLogging:
    """Tests for logging helpers."""

    def test_disable_silences_child_loggers(self):
        root = logging.getLogger(LOGGER_NAME)
        previous = root.level
        try:
            disable_logging()
            assert not logging.getLogger("dynaform.session").isEnabledFor(logging.CRITICAL)
            enable_logging("DEBUG")
            assert logging.getLogger("dynaform.session").isEnabledFor(logging.DEBUG)
        finally:
            root.setLevel(previous)

    @pytest.mark.asyncio
    async def test_traced_operation_logs_timing(self, caplog):
        caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
        async with traced_operation("unit", {"k": "v"}):
            pass
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("[TRACE START] unit") for m in messages)
        assert any(m.startswith("[TRACE END] unit") for m in messages)
