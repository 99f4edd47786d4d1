"""Component lifecycle: get, put and delete component data.

Philosophy:
- Thin orchestration: parse the reference, delegate to a hook or the default
- Collaborators are injected, nothing is module-global
- Fail fast: no retries, no fallback defaults

Public API (the "studs"):
    ComponentService: Lifecycle operations over a store and component files
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from componentstore.config import StoreConfig
from componentstore.errors import (
    ComponentStoreError,
    ContractViolation,
    NotFoundError,
    UpstreamFailure,
)
from componentstore.files import ComponentFiles, LocalComponentFiles
from componentstore.reference_path import get_name, storage_key
from componentstore.references import ReferenceResolver
from componentstore.store import Store, read_json
from componentstore.templates import TemplateLocator
from componentstore.versions import VersionedWriter

logger = logging.getLogger(__name__)


class ComponentService:
    """Get, put and delete components.

    Example:
        >>> service = ComponentService(InMemoryStore(), LocalComponentFiles("components"))
        >>> await service.put("/components/article/instances/1", {"title": "Hi"})
        >>> await service.get("/components/article/instances/1")
        {'title': 'Hi'}
    """

    def __init__(
        self,
        store: Store,
        files: ComponentFiles | None = None,
        config: StoreConfig | None = None,
    ):
        """Initialize component service.

        Args:
            store: Key-value store holding component data
            files: Component asset and hook lookup (built from config if None)
            config: Store configuration (defaults if None)
        """
        self.store = store
        self.config = config or StoreConfig()
        self.files = files if files is not None else LocalComponentFiles.from_config(self.config)
        self.resolver = ReferenceResolver(store, self.config)
        self.writer = VersionedWriter(store)
        self.templates = TemplateLocator(self.files, self.config)

    # Pass-throughs so callers only need the service

    def get_name(self, reference: str) -> str:
        return get_name(reference)

    def get_template(self, reference: str) -> Path:
        return self.templates.get_template(reference)

    async def resolve_data_references(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self.resolver.resolve_data_references(data)

    async def put_tag(self, reference: str, data: dict[str, Any], tag: str) -> None:
        await self.writer.put_tag(reference, data, tag)

    async def put_published(self, reference: str, data: dict[str, Any]) -> None:
        await self.writer.put_published(reference, data)

    async def put_latest(self, reference: str, data: dict[str, Any]) -> None:
        await self.writer.put_latest(reference, data)

    def put_default_behavior(self, reference: str, data: dict[str, Any]) -> Awaitable[None]:
        return self.writer.put_default_behavior(reference, data)

    def _get_hook(self, name: str, operation: str) -> Callable[..., Any] | None:
        """Look up a component hook function.

        Returns:
            The hook's function for the operation, or None for default behavior
        """
        module = self.files.get_component_module(name)
        if module is None:
            return None

        handler = getattr(module, operation, None)
        if handler is None:
            return None
        if not callable(handler):
            raise ContractViolation(f"Hook '{operation}' of component '{name}' is not callable")
        return handler

    async def _call_hook(
        self, handler: Callable[..., Any], reference: str, operation: str, *args: Any
    ) -> Any:
        """Invoke a hook and await its result.

        Raises:
            ContractViolation: If the hook does not return an awaitable
            UpstreamFailure: If the hook raises
        """
        try:
            result = handler(reference, *args)
        except ComponentStoreError:
            raise
        except Exception as e:
            raise UpstreamFailure(reference, f"Component hook '{operation}' failed: {e}") from e

        if not inspect.isawaitable(result):
            raise ContractViolation(
                f"Component hook '{operation}' for {reference} must return an awaitable, "
                f"got {type(result).__name__}"
            )

        try:
            return await result
        except ComponentStoreError:
            raise
        except Exception as e:
            raise UpstreamFailure(reference, f"Component hook '{operation}' failed: {e}") from e

    async def get(self, reference: str) -> dict[str, Any]:
        """Get component data with references resolved.

        Args:
            reference: Component reference

        Returns:
            Component data

        Raises:
            NotFoundError: If the component has no stored data
            UpstreamFailure: If the store or hook fails
            ContractViolation: If the hook does not return an awaitable
        """
        name = get_name(reference)
        handler = self._get_hook(name, "get")
        if handler is not None:
            return await self._call_hook(handler, reference, "get")

        data = await read_json(self.store, storage_key(reference), reference)
        return await self.resolver.resolve_data_references(data)

    async def put(self, reference: str, data: dict[str, Any]) -> dict[str, Any]:
        """Store component data under the version named in the reference.

        Args:
            reference: Component reference, optionally with @<version>
            data: Component data

        Returns:
            Data as written (or as returned by the component hook)

        Raises:
            ValidationError: If the reference, version or data is invalid
            UpstreamFailure: If the store or hook fails
            ContractViolation: If the hook does not return an awaitable
        """
        name = get_name(reference)
        handler = self._get_hook(name, "put")
        if handler is not None:
            return await self._call_hook(handler, reference, "put", data)

        await self.writer.put_default_behavior(reference, data)
        return data

    async def delete(self, reference: str) -> None:
        """Delete component data.

        A missing key is not an error; the delete is still issued.

        Raises:
            UpstreamFailure: If the store or hook fails
            ContractViolation: If the hook does not return an awaitable
        """
        name = get_name(reference)
        key = storage_key(reference)

        try:
            existing = await read_json(self.store, key, reference)
        except NotFoundError:
            logger.warning(f"No existing data for {reference}, deleting anyway")
            existing = None

        handler = self._get_hook(name, "delete")
        if handler is not None:
            await self._call_hook(handler, reference, "delete", existing)

        try:
            await self.store.delete(key)
        except ComponentStoreError:
            raise
        except Exception as e:
            raise UpstreamFailure(reference, f"Store delete failed: {e}") from e

        logger.debug(f"Deleted {reference}")


__all__ = ["ComponentService"]
