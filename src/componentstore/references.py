"""Reference resolution for component data.

Component data is a JSON tree. An object holding a ``_ref`` key is a
reference to another component's data. Resolution replaces every reference
with the referenced component's own resolved data, merged into the object
that held the ``_ref``:

    {"a": {"_ref": "/components/b"}}  +  /components/b -> {"g": "h"}
    => {"a": {"_ref": "/components/b", "g": "h"}}

Philosophy:
- Parallel execution: sibling references are fetched concurrently
- Strict recursion: a fetched document is fully resolved before merging
- Fail fast: any failed fetch fails the whole resolution and cancels
  the sibling branches still running
- Bounded: depth and cycle guards stop runaway reference chains

Public API (the "studs"):
    ReferenceResolver: Resolve references against a store
    NodeKind: Kinds of nodes in a component data tree
    classify: Kind of a single node
    REF_KEY: Marker key for references
"""

import asyncio
import logging
from collections.abc import Coroutine, Iterable
from enum import Enum
from typing import Any

from componentstore.config import StoreConfig
from componentstore.errors import (
    InvalidReferenceError,
    ReferenceCycleError,
    ReferenceDepthError,
)
from componentstore.reference_path import storage_key
from componentstore.store import Store, read_json

logger = logging.getLogger(__name__)

REF_KEY = "_ref"


class NodeKind(Enum):
    """Kind of node in a component data tree."""

    SCALAR = "scalar"
    OBJECT = "object"
    SEQUENCE = "sequence"
    REFERENCE = "reference"


def classify(value: Any) -> NodeKind:
    """Classify a JSON value.

    Args:
        value: Decoded JSON value

    Returns:
        NodeKind of the value
    """
    if isinstance(value, dict):
        return NodeKind.REFERENCE if REF_KEY in value else NodeKind.OBJECT
    if isinstance(value, (list, tuple)):
        return NodeKind.SEQUENCE
    return NodeKind.SCALAR


async def _run_all(coros: Iterable[Coroutine[Any, Any, Any]]) -> list[Any]:
    """Run coroutines concurrently and return their results in order.

    The first failure cancels the remaining coroutines and is re-raised as is,
    not wrapped in an ExceptionGroup.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coro) for coro in coros]
    except ExceptionGroup as errors:
        error = errors.exceptions[0]
        while isinstance(error, ExceptionGroup):
            error = error.exceptions[0]
        raise error

    return [task.result() for task in tasks]


class ReferenceResolver:
    """Resolve ``_ref`` markers in component data against a store.

    Example:
        >>> resolver = ReferenceResolver(store)
        >>> await resolver.resolve_data_references({"a": {"_ref": "/components/b"}})
        {'a': {'_ref': '/components/b', 'g': 'h'}}
    """

    def __init__(self, store: Store, config: StoreConfig | None = None):
        """Initialize resolver.

        Args:
            store: Store the referenced documents are read from
            config: Resolution limits (defaults if None)
        """
        self.store = store
        self.config = config or StoreConfig()

    async def resolve_data_references(self, data: dict[str, Any]) -> dict[str, Any]:
        """Resolve every reference in a data tree.

        The input is not modified; a new tree is returned.

        Args:
            data: Component data

        Returns:
            Data with every reference merged with its resolved document

        Raises:
            NotFoundError: If a referenced key does not exist
            UpstreamFailure: If the store fails or returns malformed JSON
            InvalidReferenceError: If a ``_ref`` is not a valid reference
            ReferenceLimitError: If a reference chain is cyclic or too deep
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrent_fetches)
        return await self._resolve(data, (), semaphore)

    async def _resolve(
        self, value: Any, chain: tuple[str, ...], semaphore: asyncio.Semaphore
    ) -> Any:
        kind = classify(value)

        if kind is NodeKind.SCALAR:
            return value

        if kind is NodeKind.SEQUENCE:
            return await _run_all(self._resolve(item, chain, semaphore) for item in value)

        if kind is NodeKind.OBJECT:
            return await self._resolve_fields(value, chain, semaphore)

        return await self._resolve_reference(value, chain, semaphore)

    async def _resolve_fields(
        self, obj: dict[str, Any], chain: tuple[str, ...], semaphore: asyncio.Semaphore
    ) -> dict[str, Any]:
        keys = list(obj)
        values = await _run_all(self._resolve(obj[key], chain, semaphore) for key in keys)
        return dict(zip(keys, values, strict=True))

    async def _resolve_reference(
        self, node: dict[str, Any], chain: tuple[str, ...], semaphore: asyncio.Semaphore
    ) -> dict[str, Any]:
        reference = node[REF_KEY]
        if not isinstance(reference, str):
            raise InvalidReferenceError(
                f"'{REF_KEY}' must be a string, got {type(reference).__name__}"
            )

        own_fields = {key: value for key, value in node.items() if key != REF_KEY}
        resolved_own, fetched = await _run_all(
            [
                self._resolve_fields(own_fields, chain, semaphore),
                self._fetch(reference, chain, semaphore),
            ]
        )

        merged = {REF_KEY: reference}
        merged.update(resolved_own)
        # Fetched fields win, except the marker itself
        merged.update((key, value) for key, value in fetched.items() if key != REF_KEY)
        return merged

    async def _fetch(
        self, reference: str, chain: tuple[str, ...], semaphore: asyncio.Semaphore
    ) -> dict[str, Any]:
        key = storage_key(reference)

        if key in chain:
            raise ReferenceCycleError(chain + (key,), "Reference cycle detected")
        if len(chain) >= self.config.max_reference_depth:
            raise ReferenceDepthError(
                chain + (key,),
                f"Reference depth exceeds {self.config.max_reference_depth}",
            )

        async with semaphore:
            logger.debug(f"Fetching reference {reference} (depth {len(chain) + 1})")
            document = await read_json(self.store, key, reference)

        return await self._resolve_fields(document, chain + (key,), semaphore)


__all__ = ["REF_KEY", "NodeKind", "ReferenceResolver", "classify"]
