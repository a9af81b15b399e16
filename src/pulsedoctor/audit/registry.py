# Module registry: the static catalog an audit run walks over.
# Created: 2026-10-18

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from pulsedoctor.audit.catalog import CORE_MODULES
from pulsedoctor.audit.errors import RegistryError
from pulsedoctor.audit.models import ModuleCategory, ModuleDescriptor, ModulePriority

if TYPE_CHECKING:
    from pulsedoctor.config import Settings

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Ordered, immutable catalog of module descriptors.

    Usage:
        registry = ModuleRegistry.default()
        for module in registry.list_modules():
            ...

        # Or from a JSON catalog
        registry = ModuleRegistry.from_file(Path("modules.json"))
    """

    def __init__(self, modules: Iterable[ModuleDescriptor]):
        self._modules: tuple[ModuleDescriptor, ...] = tuple(modules)

        seen: dict[str, str] = {}
        for module in self._modules:
            if not module.name:
                raise RegistryError("Module with empty name in registry")
            if module.module_id in seen:
                raise RegistryError(
                    f"Duplicate module {module.name!r} (clashes with {seen[module.module_id]!r})"
                )
            seen[module.module_id] = module.name

    def __len__(self) -> int:
        return len(self._modules)

    def list_modules(self) -> list[ModuleDescriptor]:
        """Return the modules in catalog order."""
        return list(self._modules)

    def get(self, name: str) -> ModuleDescriptor | None:
        """Look up a module by name or id."""
        for module in self._modules:
            if module.name == name or module.module_id == name:
                return module
        return None

    @classmethod
    def default(cls) -> ModuleRegistry:
        """The built-in civic platform catalog."""
        return cls(
            ModuleDescriptor(
                name=name,
                route=route,
                component_ref=component,
                priority=ModulePriority(priority),
                category=ModuleCategory(category),
            )
            for name, route, component, priority, category in CORE_MODULES
        )

    @classmethod
    def from_file(cls, path: Path) -> ModuleRegistry:
        """Load a catalog from a JSON file.

        The file holds either a list of module objects or ``{"modules": [...]}``.
        Each object needs ``name`` (or ``module``) and may set ``route``,
        ``component``, ``priority`` and ``category``.

        Raises:
            RegistryError: If the file is missing, unreadable or malformed.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # ValueError covers both JSONDecodeError and UnicodeDecodeError
            raise RegistryError(f"Could not read module catalog {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("modules")
        if not isinstance(data, list):
            raise RegistryError(f"Module catalog {path} must contain a list of modules")

        try:
            modules = [ModuleDescriptor.from_dict(entry) for entry in data]
            registry = cls(modules)
        except RegistryError:
            raise
        except (TypeError, ValueError, AttributeError) as e:
            raise RegistryError(f"Invalid module entry in {path}: {e}") from e

        logger.debug("Loaded %d modules from %s", len(modules), path)
        return registry


def load_registry(settings: Settings) -> ModuleRegistry:
    """Build the registry named by settings, falling back to the built-in catalog."""
    if settings.registry_path is not None:
        return ModuleRegistry.from_file(settings.registry_path)
    return ModuleRegistry.default()
