"""
Test utilities for componentstore tests.

Helpers for seeding stores, reading back stored documents and writing
component hook modules.
"""

import json
import textwrap
from pathlib import Path
from typing import Any

from componentstore.store import InMemoryStore


def make_store(documents: dict[str, Any]) -> InMemoryStore:
    """Create an in-memory store holding JSON-encoded documents."""
    return InMemoryStore({key: json.dumps(value) for key, value in documents.items()})


def stored(store: InMemoryStore, key: str) -> Any:
    """Decode one document from an in-memory store without awaiting."""
    return json.loads(store._data[key])


def write_hook(
    components_dir: Path, name: str, source: str, filename: str = "server.py"
) -> Path:
    """Write a hook module for a component.

    Args:
        components_dir: Components root
        name: Component name
        source: Python source (dedented before writing)
        filename: Hook module file name

    Returns:
        Path of the written hook module
    """
    component_path = components_dir / name
    component_path.mkdir(parents=True, exist_ok=True)
    hook_path = component_path / filename
    hook_path.write_text(textwrap.dedent(source))
    return hook_path
