"""Versioned writes of component data.

Version labels:
- latest: stored under the bare key ("/components/a/instances/1")
- published: stored under "<base>@published", and also written to latest
- any other tag: stored under "<base>@<tag>"
- list: reserved pseudo-version, never written

Every write is issued as exactly one atomic ``store.batch`` call.

Embedded components (objects carrying ``_ref`` plus fields of their own) are
split out into their own operations under the same label, and the parent
keeps only a ``{"_ref": ...}`` marker pointing at the labelled child.
"""

import json
import logging
from collections.abc import Awaitable
from typing import Any

from componentstore.errors import (
    ComponentStoreError,
    InvalidReferenceError,
    ReservedVersionError,
    UpstreamFailure,
    ValidationError,
)
from componentstore.reference_path import (
    LATEST,
    LIST,
    PUBLISHED,
    parse_reference,
    replace_version,
    storage_key,
)
from componentstore.references import REF_KEY, NodeKind, classify
from componentstore.store import BatchOperation, Store

logger = logging.getLogger(__name__)


def validate_label(label: str | None) -> None:
    """Check that a version label is a legal write target.

    Raises:
        ReservedVersionError: If the label is the reserved pseudo-version
        InvalidReferenceError: If the label is empty or contains separators
    """
    if label is None:
        return
    if label == LIST:
        raise ReservedVersionError(f"'@{LIST}' is reserved and cannot be written to")
    if not isinstance(label, str) or not label.strip() or "/" in label or "@" in label:
        raise InvalidReferenceError(f"Invalid version label: {label!r}")


def _check_data(reference: str, data: Any) -> None:
    if not isinstance(data, dict):
        raise ValidationError(
            f"Component data for {reference} must be an object, got {type(data).__name__}"
        )


class VersionedWriter:
    """Write component data under version labels."""

    def __init__(self, store: Store):
        self.store = store

    def get_put_operations(
        self, reference: str, data: dict[str, Any], label: str | None = None
    ) -> list[BatchOperation]:
        """Build the batch operations that store data under a label.

        Args:
            reference: Component reference
            data: Component data
            label: Version label (None or "latest" for the bare key)

        Returns:
            Operations for embedded components first, then the component itself

        Raises:
            ValidationError: If the label, reference or data is invalid
        """
        validate_label(label)
        _check_data(reference, data)
        if label == LATEST:
            label = None

        operations: list[BatchOperation] = []
        body = {key: value for key, value in data.items() if key != REF_KEY}
        body = self._split(body, label, operations)
        key = storage_key(replace_version(reference, label))
        operations.append(BatchOperation.put(key, json.dumps(body)))
        return operations

    def _split(self, value: Any, label: str | None, operations: list[BatchOperation]) -> Any:
        kind = classify(value)

        if kind is NodeKind.SCALAR:
            return value

        if kind is NodeKind.SEQUENCE:
            return [self._split(item, label, operations) for item in value]

        if kind is NodeKind.OBJECT:
            return {key: self._split(item, label, operations) for key, item in value.items()}

        child_ref = value[REF_KEY]
        if not isinstance(child_ref, str):
            raise InvalidReferenceError(
                f"'{REF_KEY}' must be a string, got {type(child_ref).__name__}"
            )

        own_fields = {key: item for key, item in value.items() if key != REF_KEY}
        if not own_fields:
            parse_reference(child_ref)
            return {REF_KEY: child_ref}

        labelled_ref = replace_version(child_ref, label)
        child_body = self._split(own_fields, label, operations)
        operations.append(BatchOperation.put(storage_key(labelled_ref), json.dumps(child_body)))
        return {REF_KEY: labelled_ref}

    async def _commit(self, reference: str, label: str, operations: list[BatchOperation]) -> None:
        try:
            await self.store.batch(operations)
        except ComponentStoreError:
            raise
        except Exception as e:
            raise UpstreamFailure(reference, f"Batch write failed: {e}") from e

        logger.debug(f"Wrote {reference} as '{label}' ({len(operations)} keys)")

    async def put_tag(self, reference: str, data: dict[str, Any], tag: str) -> None:
        """Write data under a named tag.

        Raises:
            ReservedVersionError: If the tag is "list"
            UpstreamFailure: If the batch write fails
        """
        operations = self.get_put_operations(reference, data, tag)
        await self._commit(reference, tag, operations)

    async def put_published(self, reference: str, data: dict[str, Any]) -> None:
        """Write data as published, updating latest in the same batch."""
        operations = self.get_put_operations(reference, data, PUBLISHED)
        operations += self.get_put_operations(reference, data, None)
        await self._commit(reference, PUBLISHED, operations)

    async def put_latest(self, reference: str, data: dict[str, Any]) -> None:
        """Write data as latest."""
        operations = self.get_put_operations(reference, data, None)
        await self._commit(reference, LATEST, operations)

    def put_default_behavior(self, reference: str, data: dict[str, Any]) -> Awaitable[None]:
        """Write data under the version named in the reference.

        Validation happens before anything is awaited, so an invalid
        reference raises at call time rather than when awaited.

        Args:
            reference: Component reference, optionally with @<version>
            data: Component data

        Returns:
            Awaitable completing when the write is committed

        Raises:
            ReservedVersionError: If the version is "list"
            InvalidReferenceError: If the reference is malformed
            ValidationError: If data is not an object
        """
        path = parse_reference(reference)
        validate_label(path.version)
        _check_data(reference, data)

        if path.is_latest:
            return self.put_latest(reference, data)
        if path.version == PUBLISHED:
            return self.put_published(reference, data)
        return self.put_tag(reference, data, path.version)


__all__ = ["VersionedWriter", "validate_label"]
