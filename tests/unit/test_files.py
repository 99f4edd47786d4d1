"""Unit tests for component files and hook loading."""

import pytest

import componentstore
from componentstore.config import StoreConfig
from componentstore.errors import HookLoadError
from componentstore.files import ComponentFiles, LocalComponentFiles
from tests.utils import write_hook


class TestComponentPath:
    """Test component directory lookup."""

    def test_satisfies_protocol(self, files):
        """Test LocalComponentFiles is ComponentFiles."""
        assert isinstance(files, ComponentFiles)

    def test_existing_component(self, files, components_dir):
        """Test an existing component directory is returned."""
        assert files.get_component_path("article") == components_dir / "article"

    def test_missing_component(self, files):
        """Test unknown components return None."""
        assert files.get_component_path("unknown") is None

    @pytest.mark.parametrize("name", ["", "../article", "a/b", "a\\b", ".."])
    def test_rejects_path_traversal(self, files, name):
        """Test names that could escape the components directory."""
        assert files.get_component_path(name) is None


class TestComponentModule:
    """Test hook module loading."""

    def test_no_hook_module(self, files):
        """Test components without server.py have no hook."""
        assert files.get_component_module("article") is None
        assert files.get_component_module("unknown") is None

    def test_loads_hook_module(self, files, components_dir):
        """Test server.py is imported and exposes its functions."""
        write_hook(
            components_dir,
            "article",
            """
            async def get(reference):
                return {"hooked": reference}
            """,
        )

        module = files.get_component_module("article")

        assert module is not None
        assert callable(module.get)

    def test_hook_module_is_cached(self, files, components_dir):
        """Test repeated lookups reuse the imported module."""
        write_hook(components_dir, "article", "VALUE = 1\n")

        first = files.get_component_module("article")
        (components_dir / "article" / "server.py").write_text("VALUE = 2\n")
        second = files.get_component_module("article")

        assert first is second
        assert second.VALUE == 1

    def test_custom_hook_module_name(self, components_dir):
        """Test the hook file name is configurable."""
        (components_dir / "article" / "hooks.py").write_text("VALUE = 3\n")
        files = LocalComponentFiles(components_dir, hook_module="hooks.py")

        assert files.get_component_module("article").VALUE == 3

    def test_broken_hook_module(self, files, components_dir):
        """Test import errors surface as HookLoadError."""
        write_hook(components_dir, "article", "raise RuntimeError('broken')\n")

        with pytest.raises(HookLoadError, match="broken"):
            files.get_component_module("article")

    def test_hook_load_error_is_package_error(self):
        """Test HookLoadError is exported with the rest of the error taxonomy."""
        assert componentstore.HookLoadError is HookLoadError
        assert issubclass(HookLoadError, componentstore.ComponentStoreError)

    def test_from_config(self, components_dir):
        """Test the components root and hook file name come from config."""
        (components_dir / "article" / "hooks.py").write_text("VALUE = 4\n")
        config = StoreConfig(components_dir=str(components_dir), hook_module="hooks.py")

        files = LocalComponentFiles.from_config(config)

        assert files.get_component_path("article") == components_dir / "article"
        assert files.get_component_module("article").VALUE == 4
