"""Registry of dynamic assemblies and modules, keyed by namespace.

Every generated type lives in a DynamicModule owned by a DynamicAssembly.
The ModuleRegistry guarantees that one namespace maps to exactly one
assembly/module pair for the lifetime of the registry.

The registry follows the same pattern as other global registries:
- Explicit instances for isolated use (tests, embedding)
- A lazily created process-wide default (get_module_registry)
- A reset hook (reset_module_registry)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from typeforge.blueprint import TypeBlueprint
from typeforge.errors import DuplicateTypeError, EmptyNameError

if TYPE_CHECKING:
    from typeforge.access import TypeAttributes

logger = logging.getLogger(__name__)


# =============================================================================
# Dynamic assemblies and modules
# =============================================================================


class DynamicModule:
    """Container of the types generated under one namespace."""

    def __init__(self, name: str, assembly: DynamicAssembly) -> None:
        self.name = name
        self.assembly = assembly
        self._blueprints: dict[str, TypeBlueprint] = {}
        self._types: dict[str, type] = {}
        self._lock = threading.Lock()

    def define_type(
        self,
        full_name: str,
        attributes: TypeAttributes,
        base: type | None,
        interfaces: tuple[type, ...] = (),
    ) -> TypeBlueprint:
        """Reserve a type name and return a blueprint for it.

        Raises:
            DuplicateTypeError: If the name was already defined in this module
        """
        if not full_name:
            raise EmptyNameError("full_name")
        prefix = f"{self.name}."
        short_name = full_name[len(prefix) :] if full_name.startswith(prefix) else full_name
        short_name = short_name.rsplit(".", 1)[-1]

        with self._lock:
            if full_name in self._blueprints:
                raise DuplicateTypeError(full_name, self.name)
            blueprint = TypeBlueprint(self, short_name, full_name, attributes, base, interfaces)
            self._blueprints[full_name] = blueprint

        logger.debug("Defined type %s in module %s", full_name, self.name)
        return blueprint

    def register_type(self, full_name: str, cls: type) -> None:
        """Record a baked type."""
        with self._lock:
            self._types[full_name] = cls

    def get_type(self, full_name: str) -> type | None:
        return self._types.get(full_name)

    def get_blueprint(self, full_name: str) -> TypeBlueprint | None:
        return self._blueprints.get(full_name)

    def get_types(self) -> list[type]:
        """Get all baked types, in baking order."""
        return list(self._types.values())

    def __repr__(self) -> str:
        return f"<DynamicModule {self.name} ({len(self._types)} types)>"


class DynamicAssembly:
    """Owner of one or more dynamic modules."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._modules: dict[str, DynamicModule] = {}

    @property
    def modules(self) -> list[DynamicModule]:
        return list(self._modules.values())

    def define_module(self, name: str) -> DynamicModule:
        module = DynamicModule(name, self)
        self._modules[name] = module
        return module

    def get_module(self, name: str) -> DynamicModule | None:
        return self._modules.get(name)

    def get_types(self) -> list[type]:
        """Get every baked type of every module."""
        return [cls for module in self._modules.values() for cls in module.get_types()]

    def __repr__(self) -> str:
        return f"<DynamicAssembly {self.name} ({len(self._modules)} modules)>"


# =============================================================================
# Registry
# =============================================================================


class ModuleRegistry:
    """Namespace to assembly/module map.

    Reads of an existing namespace take no lock. Creation is serialized by
    one lock per map, so concurrent first requests for a namespace all
    receive the same pair.
    """

    def __init__(self) -> None:
        self._assemblies: dict[str, DynamicAssembly] = {}
        self._modules: dict[str, DynamicModule] = {}
        self._assemblies_lock = threading.Lock()
        self._modules_lock = threading.Lock()

    def get_or_create_module(self, namespace: str) -> DynamicModule:
        """Get the module for a namespace, creating it on first use."""
        if not namespace:
            raise EmptyNameError("namespace")

        module = self._modules.get(namespace)
        if module is not None:
            return module

        with self._assemblies_lock:
            assembly = self._assemblies.get(namespace)
            if assembly is None:
                assembly = DynamicAssembly(namespace)
                self._assemblies[namespace] = assembly
                logger.debug("Created dynamic assembly %s", namespace)

        with self._modules_lock:
            module = self._modules.get(namespace)
            if module is None:
                module = assembly.define_module(namespace)
                self._modules[namespace] = module
                logger.debug("Created dynamic module %s", namespace)

        return module

    def get_assembly(self, namespace: str) -> DynamicAssembly | None:
        return self._assemblies.get(namespace)

    def get_module(self, namespace: str) -> DynamicModule | None:
        return self._modules.get(namespace)

    def namespaces(self) -> list[str]:
        return list(self._modules)

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._modules

    def reset(self) -> None:
        """Forget every namespace (mainly for testing).

        Types already generated stay alive as long as they are referenced.
        """
        with self._assemblies_lock, self._modules_lock:
            self._assemblies.clear()
            self._modules.clear()


# =============================================================================
# Global Registry
# =============================================================================

_global_module_registry: ModuleRegistry | None = None
_global_lock = threading.Lock()


def get_module_registry() -> ModuleRegistry:
    """Get the process-wide module registry.

    Creates the registry on first call.
    """
    global _global_module_registry

    if _global_module_registry is None:
        with _global_lock:
            if _global_module_registry is None:
                _global_module_registry = ModuleRegistry()

    return _global_module_registry


def reset_module_registry() -> None:
    """Reset the process-wide module registry (mainly for testing)."""
    global _global_module_registry
    with _global_lock:
        _global_module_registry = None


__all__ = [
    "DynamicAssembly",
    "DynamicModule",
    "ModuleRegistry",
    "get_module_registry",
    "reset_module_registry",
]
