# tests/conftest.py

"""Shared pytest fixtures for all client tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_logs_dir(tmp_path: Path) -> Generator[None, None, None]:
    """Point LOGS_DIR at a per-test directory so runs leave no files."""
    original = Settings.LOGS_DIR
    Settings.LOGS_DIR = tmp_path / "logs"
    yield
    Settings.LOGS_DIR = original
