"""Error taxonomy for component store operations.

Philosophy:
- One exception class per failure mode
- Fail fast: nothing here is retried or defaulted
- Context travels with the error (the key or reference that failed)

Public API:
    ComponentStoreError: Base error for everything raised by this package
    NotFoundError: Store key absent on read
    ValidationError: Bad input detected before any I/O
    InvalidReferenceError: Malformed reference string or `_ref` value
    ReservedVersionError: Reserved pseudo-version used as a write target
    UpstreamFailure: Store or hook call failed
    ContractViolation: Hook broke its calling contract
    TemplateNotFoundError: No template asset for a component
    ReferenceLimitError: Reference chain exceeded a guard
    ReferenceDepthError: Reference chain too deep
    ReferenceCycleError: Reference chain loops back on itself
    ConfigError: Configuration could not be loaded
    HookLoadError: Component hook module failed to import
"""

__all__ = [
    "ComponentStoreError",
    "ConfigError",
    "ContractViolation",
    "HookLoadError",
    "InvalidReferenceError",
    "NotFoundError",
    "ReferenceCycleError",
    "ReferenceDepthError",
    "ReferenceLimitError",
    "ReservedVersionError",
    "TemplateNotFoundError",
    "UpstreamFailure",
    "ValidationError",
]


class ComponentStoreError(Exception):
    """Base exception for component store errors."""

    pass


class NotFoundError(ComponentStoreError):
    """Raised when a store key does not exist."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key not found: {key}")


class ValidationError(ComponentStoreError):
    """Raised when input is rejected before any I/O happens."""

    pass


class InvalidReferenceError(ValidationError):
    """Raised when a reference string does not follow the component grammar."""

    pass


class ReservedVersionError(ValidationError):
    """Raised when a reserved pseudo-version is used as a write target."""

    pass


class UpstreamFailure(ComponentStoreError):
    """Raised when a store or hook operation fails.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, reference: str, message: str):
        self.reference = reference
        super().__init__(f"{message} (reference: {reference})")


class ContractViolation(ComponentStoreError):
    """Raised when a component hook does not return an awaitable."""

    pass


class TemplateNotFoundError(ComponentStoreError):
    """Raised when no template asset exists for a component."""

    pass


class HookLoadError(ComponentStoreError):
    """Raised when a component hook module exists but cannot be imported."""

    pass


class ReferenceLimitError(ComponentStoreError):
    """Base for reference chains that exceed a resolution guard."""

    def __init__(self, chain: tuple[str, ...], message: str):
        self.chain = chain
        super().__init__(f"{message}: {' -> '.join(chain)}")


class ReferenceDepthError(ReferenceLimitError):
    """Raised when nested references exceed the configured depth."""

    pass


class ReferenceCycleError(ReferenceLimitError):
    """Raised when a reference points back at one of its ancestors."""

    pass


class ConfigError(ComponentStoreError):
    """Raised when configuration operations fail."""

    pass
