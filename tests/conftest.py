"""
Shared test fixtures and configuration for componentstore tests.

This module provides common fixtures used across all test types:
- Empty in-memory store
- Temporary component directories with templates
- Service instances wired to both
"""

import pytest

from componentstore.components import ComponentService
from componentstore.config import StoreConfig
from componentstore.files import LocalComponentFiles
from componentstore.store import InMemoryStore

# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryStore()


# ============================================================================
# COMPONENT DIRECTORY FIXTURES
# ============================================================================


@pytest.fixture
def components_dir(tmp_path):
    """Temporary components directory.

    Layout:
        components/
            article/template.html
            paragraph/template.nunjucks
            paragraph/template.html
            empty/
    """
    root = tmp_path / "components"
    (root / "article").mkdir(parents=True)
    (root / "article" / "template.html").write_text("<article>{{ title }}</article>")
    (root / "paragraph").mkdir()
    (root / "paragraph" / "template.nunjucks").write_text("<p>{{ text }}</p>")
    (root / "paragraph" / "template.html").write_text("<p>{{ text }}</p>")
    (root / "empty").mkdir()
    return root


@pytest.fixture
def files(components_dir):
    """Component files over the temporary components directory."""
    return LocalComponentFiles(components_dir)


@pytest.fixture
def config(components_dir):
    """Default config pointing at the temporary components directory."""
    return StoreConfig(components_dir=str(components_dir))


@pytest.fixture
def service(store, files, config):
    """Component service over an empty store."""
    return ComponentService(store, files, config)
