"""Pytest configuration for componentstore tests.

Keeps a developer's own componentstore.toml or COMPONENTSTORE_CONFIG from
leaking into test runs.
"""

import pytest


@pytest.fixture(autouse=True)
def isolate_config_env(monkeypatch, tmp_path):
    """Run every test with no config env var and an empty working directory."""
    monkeypatch.delenv("COMPONENTSTORE_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
