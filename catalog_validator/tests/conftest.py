# Path: catalog_validator/tests/conftest.py
"""Shared pytest fixtures: every test starts from a clean configuration."""

import os

import pytest

from catalog_validator.core.config_loader import ConfigLoader
from catalog_validator.constants import ENV_PREFIX


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """No CATALOG_VALIDATOR_* variables, no .env file, fresh ConfigLoader."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


@pytest.fixture
def config():
    return ConfigLoader()
