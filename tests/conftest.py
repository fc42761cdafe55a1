"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from respimage.paths import PathResolver
from respimage.registry import PresetRegistry
from respimage.thumbnails import MemoryMetadataCache, ThumbnailEngine


@pytest.fixture
def webroot(tmp_path: Path) -> Path:
    """Served web directory with an empty img/ folder."""
    root = tmp_path / "web"
    (root / "img").mkdir(parents=True)
    return root


@pytest.fixture
def resolver(webroot: Path) -> PathResolver:
    return PathResolver({"@webroot": str(webroot), "@web": ""})


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Write a real image file and return its path."""

    def _make(
        path: Path,
        size: tuple[int, int] = (200, 100),
        color: str = "red",
        mode: str = "RGB",
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new(mode, size, color).save(path)
        return path

    return _make


@pytest.fixture
def raw_presets() -> dict[str, dict]:
    """Raw preset configuration, as it would appear in a config file."""
    return {
        "card": {
            "srcPath": "@webroot/img",
            "width": 80,
            "height": 40,
            "breakpointMin": 992,
        },
        "mobile": {
            "srcPath": "@web/img",
            "targetPath": "@webroot/thumbs/{width}x{height}",
            "targetExtension": "jpg",
            "width": 50,
            "quality": 60,
            "breakpointMax": 991,
            "cacheBusting": False,
        },
    }


@pytest.fixture
def registry(resolver: PathResolver, raw_presets: dict[str, dict]) -> PresetRegistry:
    return PresetRegistry(resolver, raw_presets)


@pytest.fixture
def metadata_cache() -> MemoryMetadataCache:
    return MemoryMetadataCache()


@pytest.fixture
def engine(
    registry: PresetRegistry,
    resolver: PathResolver,
    metadata_cache: MemoryMetadataCache,
) -> ThumbnailEngine:
    return ThumbnailEngine(registry, resolver, cache=metadata_cache)
