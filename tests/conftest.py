"""Shared fixtures. Images are generated on the fly with Pillow."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory that writes a solid-colour image under ``tmp_path``."""

    def _make(
        name: str,
        *,
        size: tuple[int, int] = (100, 100),
        mode: str = "RGB",
        color: object = "red",
    ) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path)
        return path

    return _make


@pytest.fixture
def corrupt_image(tmp_path: Path) -> Callable[[str], Path]:
    """Return a factory that writes a file with an image suffix but no image."""

    def _make(name: str) -> Path:
        path = tmp_path / name
        path.write_bytes(b"this is not an image")
        return path

    return _make
