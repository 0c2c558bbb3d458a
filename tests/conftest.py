"""
Pytest configuration and fixtures for quickapp-deploy tests.
"""

import logging
import os
import zipfile
from pathlib import Path

import pytest
import structlog

from quickapp_deploy.core.config import Settings


@pytest.fixture(autouse=True)
def clean_quickapp_env(monkeypatch, tmp_path):
    """
    Remove QUICKAPP_* variables so host configuration never leaks into tests,
    and run every test from an empty directory so no .env file is picked up.
    """
    for key in list(os.environ):
        if key.upper().startswith("QUICKAPP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_logging():
    """
    Undo setup_logging() after each test. The CLI configures logging against
    pytest's capture stream, which is closed once the test finishes.
    """
    root = logging.getLogger()
    level = root.level
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    # basicConfig() installs a plain StreamHandler; pytest's own handlers are subclasses
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        default_workspace=str(tmp_path / "workspace"),
        scratch_dir=str(tmp_path / "scratch"),
    )


def make_zip(path: Path, files: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return path


def zip_bytes(tmp_path: Path, files: dict) -> bytes:
    return make_zip(tmp_path / "_payload.zip", files).read_bytes()
