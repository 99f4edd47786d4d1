"""Component asset lookup and per-component hook loading.

Each component owns a directory under the components root:

    components/
        article/
            template.html
            server.py      <- optional hook module

A hook module may define any of ``get(reference)``, ``put(reference, data)``
and ``delete(reference, data)``. Each must return an awaitable (normally it
is an ``async def``). Missing functions mean default behavior.

Public API (the "studs"):
    ComponentFiles: Protocol for asset lookup collaborators
    ComponentHook: Protocol describing the optional hook functions
    LocalComponentFiles: Directory-backed ComponentFiles
"""

import hashlib
import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol, runtime_checkable

from componentstore.config import StoreConfig
from componentstore.errors import HookLoadError

logger = logging.getLogger(__name__)


class ComponentHook(Protocol):
    """Optional per-component behavior.

    Every member is optional; callers look them up with getattr.
    """

    def get(self, reference: str) -> Any: ...

    def put(self, reference: str, data: dict[str, Any]) -> Any: ...

    def delete(self, reference: str, data: dict[str, Any] | None) -> Any: ...


@runtime_checkable
class ComponentFiles(Protocol):
    """Lookup of component directories and hook modules."""

    def get_component_path(self, name: str) -> Path | None: ...

    def get_component_module(self, name: str) -> ComponentHook | None: ...


class LocalComponentFiles:
    """Component files backed by a local directory tree.

    Hook modules are imported once per instance and reused.

    Example:
        >>> files = LocalComponentFiles(Path("components"))
        >>> files.get_component_path("article")
        PosixPath('components/article')
    """

    def __init__(self, components_dir: Path | str, hook_module: str = "server.py"):
        """Initialize component files.

        Args:
            components_dir: Root directory containing one directory per component
            hook_module: File name of the optional hook module
        """
        self.components_dir = Path(components_dir)
        self.hook_module = hook_module
        self._modules: dict[str, ModuleType | None] = {}

    @classmethod
    def from_config(cls, config: StoreConfig) -> "LocalComponentFiles":
        """Create component files from the configured directory and hook file name."""
        return cls(config.components_dir, hook_module=config.hook_module)

    def get_component_path(self, name: str) -> Path | None:
        """Get the asset directory of a component.

        Returns:
            Directory path, or None if the component has no directory
        """
        if not name or "/" in name or "\\" in name or ".." in name:
            return None

        path = self.components_dir / name
        if not path.is_dir():
            return None
        return path

    def get_component_module(self, name: str) -> ModuleType | None:
        """Get the hook module of a component.

        Returns:
            Imported module, or None if the component has no hook module

        Raises:
            HookLoadError: If the hook module fails to import
        """
        if name in self._modules:
            return self._modules[name]

        component_path = self.get_component_path(name)
        module_path = component_path / self.hook_module if component_path else None

        if module_path is None or not module_path.is_file():
            self._modules[name] = None
            return None

        module = self._load_module(name, module_path)
        self._modules[name] = module
        logger.debug(f"Loaded hook module for component '{name}' from {module_path}")
        return module

    def _load_module(self, name: str, module_path: Path) -> ModuleType:
        module_path = module_path.resolve()

        # Deterministic per file so re-imports replace rather than duplicate
        path_hash = hashlib.sha1(str(module_path).encode("utf-8")).hexdigest()[:12]
        module_name = f"componentstore_hook_{name.replace('-', '_')}_{path_hash}"

        spec = importlib.util.spec_from_file_location(module_name, str(module_path))
        if spec is None or spec.loader is None:
            raise HookLoadError(f"Cannot create module spec for {module_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module

        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise HookLoadError(f"Failed to import hook module {module_path}: {e}") from e

        return module


__all__ = ["ComponentFiles", "ComponentHook", "LocalComponentFiles"]
