"""Template asset lookup for components.

Templates live in the component's directory and are matched against the
configured filename patterns. Patterns are tried in configured order and
matches within a pattern are sorted by name, so the result never depends on
filesystem ordering.
"""

import logging
from pathlib import Path

from componentstore.config import StoreConfig
from componentstore.errors import TemplateNotFoundError
from componentstore.files import ComponentFiles
from componentstore.reference_path import get_name

logger = logging.getLogger(__name__)


class TemplateLocator:
    """Find the template asset of a component."""

    def __init__(self, files: ComponentFiles, config: StoreConfig | None = None):
        self.files = files
        self.config = config or StoreConfig()

    def find_templates(self, component_path: Path) -> list[Path]:
        """List candidate templates in precedence order."""
        candidates: list[Path] = []
        for pattern in self.config.template_patterns:
            for match in sorted(component_path.glob(pattern), key=lambda p: p.name):
                if match.is_file() and match not in candidates:
                    candidates.append(match)
        return candidates

    def get_template(self, reference: str) -> Path:
        """Get the template for the component a reference points at.

        Args:
            reference: Component reference

        Returns:
            Path of the highest-precedence template

        Raises:
            InvalidReferenceError: If the reference is malformed
            TemplateNotFoundError: If the component has no template
        """
        name = get_name(reference)
        component_path = self.files.get_component_path(name)

        if component_path is None:
            raise TemplateNotFoundError(
                f"No template found for '{name}': component has no directory"
            )

        candidates = self.find_templates(Path(component_path))
        if not candidates:
            raise TemplateNotFoundError(
                f"No template found for '{name}' in {component_path} "
                f"(patterns: {', '.join(self.config.template_patterns)})"
            )

        if len(candidates) > 1:
            logger.debug(
                f"Multiple templates for '{name}', using {candidates[0].name} "
                f"over {', '.join(c.name for c in candidates[1:])}"
            )
        return candidates[0]


__all__ = ["TemplateLocator"]
