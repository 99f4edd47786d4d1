"""Store contract and in-memory implementation.

Philosophy:
- The storage engine is a collaborator, not part of this package
- Documents are UTF-8 JSON strings keyed by storage key
- Batches are all-or-nothing

Public API (the "studs"):
    Store: Protocol every storage backend implements
    BatchOperation: One put or delete inside a batch
    OperationType: Batch operation kinds
    InMemoryStore: Dict-backed Store for tests and embedding
    read_json: Read and decode one document, wrapping failures
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

from componentstore.errors import ComponentStoreError, NotFoundError, UpstreamFailure

logger = logging.getLogger(__name__)


class OperationType(StrEnum):
    """Kind of batch operation."""

    PUT = "put"
    DELETE = "del"


@dataclass(frozen=True)
class BatchOperation:
    """Single operation inside an atomic batch.

    Attributes:
        type: Operation kind
        key: Storage key
        value: Serialized document (puts only)
    """

    type: OperationType
    key: str
    value: str | None = None

    @classmethod
    def put(cls, key: str, value: str) -> "BatchOperation":
        """Create a put operation."""
        return cls(type=OperationType.PUT, key=key, value=value)

    @classmethod
    def delete(cls, key: str) -> "BatchOperation":
        """Create a delete operation."""
        return cls(type=OperationType.DELETE, key=key)


@runtime_checkable
class Store(Protocol):
    """Key-value storage backend.

    ``get`` raises NotFoundError for absent keys. ``batch`` applies every
    operation or none of them.
    """

    async def get(self, key: str) -> str: ...

    async def put(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def batch(self, operations: list[BatchOperation]) -> None: ...


class InMemoryStore:
    """Dict-backed store.

    Example:
        >>> store = InMemoryStore({"/components/b": '{"g": "h"}'})
        >>> await store.get("/components/b")
        '{"g": "h"}'
    """

    def __init__(self, initial: dict[str, str] | None = None):
        """Initialize store.

        Args:
            initial: Optional initial key -> serialized document mapping
        """
        self._data: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def keys(self) -> list[str]:
        """Return stored keys in sorted order."""
        return sorted(self._data)

    async def get(self, key: str) -> str:
        try:
            return self._data[key]
        except KeyError:
            raise NotFoundError(key) from None

    async def put(self, key: str, value: str) -> None:
        async with self._lock:
            self._data[key] = value

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._data.pop(key, None)

    async def batch(self, operations: list[BatchOperation]) -> None:
        """Apply operations atomically.

        Raises:
            ValueError: If any operation is malformed (nothing is applied)
        """
        for op in operations:
            if op.type is OperationType.PUT and not isinstance(op.value, str):
                raise ValueError(f"Put operation for '{op.key}' has no string value")
            if op.type not in (OperationType.PUT, OperationType.DELETE):
                raise ValueError(f"Unknown operation type: {op.type}")

        async with self._lock:
            for op in operations:
                if op.type is OperationType.PUT:
                    self._data[op.key] = op.value  # type: ignore[assignment]
                else:
                    self._data.pop(op.key, None)

        logger.debug(f"Applied batch of {len(operations)} operations")


async def read_json(store: Store, key: str, reference: str | None = None) -> dict[str, Any]:
    """Read one document from the store and decode it.

    Args:
        store: Store to read from
        key: Storage key
        reference: Reference reported in errors (defaults to key)

    Returns:
        Decoded JSON object

    Raises:
        NotFoundError: If the key does not exist
        UpstreamFailure: If the store fails or the document is not a JSON object
    """
    reference = reference or key

    try:
        raw = await store.get(key)
    except ComponentStoreError:
        raise
    except Exception as e:
        raise UpstreamFailure(reference, f"Store read failed: {e}") from e

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise UpstreamFailure(reference, f"Malformed JSON document: {e}") from e

    if not isinstance(data, dict):
        raise UpstreamFailure(
            reference, f"Stored document must be a JSON object, got {type(data).__name__}"
        )

    return data


__all__ = ["BatchOperation", "InMemoryStore", "OperationType", "Store", "read_json"]
