"""componentstore - reference-resolving versioned component store accessor

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Collaborators injected, never imported as singletons
- Fail fast with helpful errors

Loads component data from a key-value store, expands embedded ``_ref``
references recursively, and writes data back under version labels
(latest, published, named tags).
"""

__version__ = "0.1.0"

from componentstore.components import ComponentService
from componentstore.config import ConfigManager, StoreConfig
from componentstore.errors import (
    ComponentStoreError,
    ConfigError,
    ContractViolation,
    HookLoadError,
    InvalidReferenceError,
    NotFoundError,
    ReferenceCycleError,
    ReferenceDepthError,
    ReferenceLimitError,
    ReservedVersionError,
    TemplateNotFoundError,
    UpstreamFailure,
    ValidationError,
)
from componentstore.files import ComponentFiles, ComponentHook, LocalComponentFiles
from componentstore.reference_path import (
    ComponentPath,
    get_name,
    parse_reference,
    replace_version,
    storage_key,
)
from componentstore.references import ReferenceResolver
from componentstore.store import BatchOperation, InMemoryStore, Store
from componentstore.templates import TemplateLocator
from componentstore.versions import VersionedWriter

__all__ = [
    "BatchOperation",
    "ComponentFiles",
    "ComponentHook",
    "ComponentPath",
    "ComponentService",
    "ComponentStoreError",
    "ConfigError",
    "ConfigManager",
    "ContractViolation",
    "HookLoadError",
    "InMemoryStore",
    "InvalidReferenceError",
    "LocalComponentFiles",
    "NotFoundError",
    "ReferenceCycleError",
    "ReferenceDepthError",
    "ReferenceLimitError",
    "ReferenceResolver",
    "ReservedVersionError",
    "Store",
    "StoreConfig",
    "TemplateLocator",
    "TemplateNotFoundError",
    "UpstreamFailure",
    "ValidationError",
    "VersionedWriter",
    "get_name",
    "parse_reference",
    "replace_version",
    "storage_key",
]
