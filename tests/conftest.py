from __future__ import annotations

import logging
from pathlib import Path

import pytest

from samples import SDK_PROJECT


@pytest.fixture
def write_project(tmp_path):
    """Write a project file below tmp_path and return its path."""

    def _write(name: str = "App.csproj", content: str | None = None, version: str = "1.0.0.0") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = content if content is not None else SDK_PROJECT.format(version=version)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_projstamp_logger():
    yield
    logger = logging.getLogger("projstamp")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
