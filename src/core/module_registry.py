"""Module registry for managing feature modules."""

from typing import ClassVar

from src.core.config import settings
from src.core.module import Module


class _RegistryState:
    """Singleton state for module registry."""

    modules: ClassVar[dict[str, Module]] = {}


_registry = _RegistryState()


def register_module(module: Module) -> None:
    """Register a module in the registry.

    Args:
        module: Module instance to register

    Raises:
        ValueError: If a module with the same name is already registered
    """
    if module.name in _registry.modules:
        msg = f"Module '{module.name}' is already registered"
        raise ValueError(msg)
    _registry.modules[module.name] = module


def get_modules() -> dict[str, Module]:
    """Get all registered modules.

    Returns:
        Dictionary mapping module names to Module instances
    """
    return dict(_registry.modules)


def get_module(name: str) -> Module | None:
    """Get a specific module by name.

    Args:
        name: Module name to retrieve

    Returns:
        Module instance if found, None otherwise
    """
    return _registry.modules.get(name)


def get_missing_config() -> list[str]:
    """Get required settings that registered modules declare but are not set.

    Returns:
        Upper-cased environment variable names, in registration order
    """
    missing: list[str] = []
    for module in _registry.modules.values():
        for field in module.get_config_fields():
            if field.required and not getattr(settings, field.name, None) and field.name.upper() not in missing:
                missing.append(field.name.upper())
    return missing


def clear_modules() -> None:
    """Remove all registered modules."""
    _registry.modules.clear()


def register_default_modules() -> None:
    """Register the built-in modules. Safe to call more than once."""
    from src.modules.pantry import PantryModule
    from src.modules.units import UnitsModule

    for module in (PantryModule(), UnitsModule()):
        if module.name not in _registry.modules:
            register_module(module)
