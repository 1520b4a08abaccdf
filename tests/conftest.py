"""
Shared pytest fixtures for nextasset.

- Settings are reset between tests (the settings singleton is process-wide)
- Small asset trees and Pillow-generated images built under tmp_path

The event loop is managed by pytest-asyncio in auto mode (see pyproject.toml).
"""

from pathlib import Path

import pytest
from PIL import Image

from nextasset.config.settings import reset_settings


@pytest.fixture(autouse=True)
def clean_settings(tmp_path, monkeypatch):
    """Fresh default settings; cwd moved so a stray nextasset.yaml is never read."""
    monkeypatch.chdir(tmp_path)
    reset_settings()
    yield
    reset_settings()


def _write_file(path: Path, content: bytes | str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        path.write_text(content, encoding="utf-8")
    else:
        path.write_bytes(content)
    return path


def _make_image(path: Path, size=(64, 32), color=(200, 30, 30), mode="RGB", fmt=None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new(mode, size, color)
    img.save(path, format=fmt)
    return path


@pytest.fixture
def write_file():
    """Create parent folders and write bytes or utf-8 text."""
    return _write_file


@pytest.fixture
def make_image():
    """Write a solid-colour image; format inferred from the suffix unless given."""
    return _make_image


@pytest.fixture
def public_dir(tmp_path):
    """Empty asset root."""
    directory = tmp_path / "public"
    directory.mkdir()
    return directory


@pytest.fixture
def src_dir(tmp_path):
    """Empty reference root."""
    directory = tmp_path / "src"
    directory.mkdir()
    return directory
