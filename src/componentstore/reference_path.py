"""Component reference parsing.

Grammar:
    [<site>]/components/<name>[/instances/<id>][.<ext>][@<version>]

Examples:
    /components/article                      -> name=article
    /components/article/instances/abc        -> name=article, instance=abc
    /components/article/instances/abc.html   -> ... extension=html
    /components/article/instances/abc@v2     -> ... version=v2
    example.com/components/article@published -> site=example.com, version=published

Philosophy:
- Pure functions, no I/O
- Malformed input raises instead of returning a misleading name

Public API:
    ComponentPath: Parsed reference
    parse_reference: Parse reference string into ComponentPath
    get_name: Component name of a reference
    replace_version: Same reference under another version
    storage_key: Store key for a reference
    is_reference: Check whether a string is a component reference
"""

import re
from dataclasses import dataclass

from componentstore.errors import InvalidReferenceError

__all__ = [
    "LATEST",
    "LIST",
    "PUBLISHED",
    "ComponentPath",
    "get_name",
    "is_reference",
    "parse_reference",
    "replace_version",
    "storage_key",
]

LATEST = "latest"
PUBLISHED = "published"
# Pseudo-version for version listings, never a write target
LIST = "list"

REFERENCE_PATTERN = re.compile(
    r"^(?P<site>[^@]*?)/components/(?P<name>[^/@.]+)"
    r"(?:/instances/(?P<instance>[^/@.]+))?"
    r"(?:\.(?P<extension>[^/@.]+))?"
    r"(?:@(?P<version>[^/@]+))?$"
)


@dataclass(frozen=True)
class ComponentPath:
    """Parsed component reference."""

    name: str
    site: str = ""
    instance: str | None = None
    extension: str | None = None
    version: str | None = None

    @property
    def base(self) -> str:
        """Reference without extension or version."""
        result = f"{self.site}/components/{self.name}"
        if self.instance:
            result += f"/instances/{self.instance}"
        return result

    @property
    def is_latest(self) -> bool:
        """True when the reference targets the latest version."""
        return self.version is None or self.version == LATEST

    def __str__(self) -> str:
        """Reconstruct the reference string."""
        result = self.base
        if self.extension:
            result += f".{self.extension}"
        if self.version:
            result += f"@{self.version}"
        return result


def parse_reference(reference: str) -> ComponentPath:
    """Parse a reference string into a ComponentPath.

    A single trailing slash is ignored.

    Args:
        reference: Reference like "/components/name/instances/id@published"

    Returns:
        ComponentPath with parsed fields

    Raises:
        InvalidReferenceError: If the reference does not follow the grammar
    """
    if not isinstance(reference, str):
        raise InvalidReferenceError(f"Reference must be a string, got {type(reference).__name__}")

    candidate = reference[:-1] if reference.endswith("/") else reference
    match = REFERENCE_PATTERN.match(candidate)
    if not match:
        raise InvalidReferenceError(f"Invalid component reference: '{reference}'")

    return ComponentPath(
        name=match.group("name"),
        site=match.group("site"),
        instance=match.group("instance"),
        extension=match.group("extension"),
        version=match.group("version"),
    )


def get_name(reference: str) -> str:
    """Get the component name from a reference.

    Raises:
        InvalidReferenceError: If the reference has no /components/<name> part
    """
    return parse_reference(reference).name


def replace_version(reference: str, version: str | None) -> str:
    """Return the reference with its version replaced.

    The extension is dropped, since versions address data, not renderings.

    Args:
        reference: Component reference
        version: New version, or None to remove the version

    Returns:
        Reference string
    """
    path = parse_reference(reference)
    if version:
        return f"{path.base}@{version}"
    return path.base


def storage_key(reference: str) -> str:
    """Get the store key for a reference.

    Latest data lives under the bare key, every other version under
    "<base>@<version>".
    """
    path = parse_reference(reference)
    if path.is_latest:
        return path.base
    return f"{path.base}@{path.version}"


def is_reference(value: object) -> bool:
    """Check whether a value is a parseable component reference."""
    if not isinstance(value, str):
        return False
    candidate = value[:-1] if value.endswith("/") else value
    return REFERENCE_PATTERN.match(candidate) is not None
