"""
Service registry for dynaform.

Validators, renderers and LOV providers may need collaborators supplied by
the host application (rule sets, data services, encryption). The registry
is an explicitly constructed object passed into sessions and pipelines.
"""

from typing import Any, Callable


class ServiceRegistry:
    """
    Explicit key -> service map.

    Keys are usually types (``registry.register(RuleSet, rules)``) but any
    hashable key works, so named services such as LOV data sources can be
    registered with a string key.

    Usage:
        services = ServiceRegistry()
        services.register("countries", CountryService())
        services.register_factory(ColorPickerRenderer, ColorPickerRenderer)

        provider = services.get("countries")
    """

    def __init__(self):
        self._instances: dict[Any, Any] = {}
        self._factories: dict[Any, Callable[[], Any]] = {}

    def register(self, key: Any, instance: Any) -> "ServiceRegistry":
        """Register a ready-made service instance."""
        self._instances[key] = instance
        return self

    def register_factory(self, key: Any, factory: Callable[[], Any]) -> "ServiceRegistry":
        """Register a factory called on every lookup."""
        self._factories[key] = factory
        return self

    def get(self, key: Any, default: Any = None) -> Any:
        """Resolve a service, returning ``default`` when nothing is registered."""
        if key in self._instances:
            return self._instances[key]
        factory = self._factories.get(key)
        if factory is not None:
            return factory()
        return default

    def require(self, key: Any) -> Any:
        """Resolve a service, raising ``KeyError`` when nothing is registered."""
        service = self.get(key)
        if service is None:
            raise KeyError(f"No service registered for {key!r}")
        return service

    def __contains__(self, key: Any) -> bool:
        return key in self._instances or key in self._factories
