"""Responsive ``<picture>`` source data.

Builds the ``srcset``/``media`` pairs a template needs to let the browser pick
the thumbnail matching the viewport. Rendering the tags is left to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

from respimage.models.preset import Preset
from respimage.thumbnails.engine import ThumbnailEngine


class PictureSource(BaseModel):
    """One ``<source>`` entry of a picture element."""

    preset: str
    srcset: str
    media: str


class Picture(BaseModel):
    """Everything a ``<picture>`` element needs: its sources and the ``<img>`` fallback."""

    src: str
    sources: list[PictureSource]


def media_query(preset: Preset) -> str:
    """Media query selecting a preset, e.g. ``(min-width: 992px) and (max-width: 1200px)``."""
    media = []
    if preset.has_breakpoint_min:
        media.append(f"(min-width: {preset.breakpoint_min}px)")
    if preset.has_breakpoint_max:
        media.append(f"(max-width: {preset.breakpoint_max}px)")
    return " and ".join(media)


def build_picture_sources(
    engine: ThumbnailEngine,
    image: str | Path,
    preset_names: Iterable[str],
) -> list[PictureSource]:
    """Create thumbnails for ``image`` and describe one source per preset, in order."""
    sources = []
    for name in preset_names:
        thumbnail = engine.get_thumbnail(image, name)
        preset = engine.registry.get_preset(name)
        sources.append(
            PictureSource(preset=name, srcset=f"{thumbnail} 1x", media=media_query(preset))
        )
    return sources


def build_picture(
    engine: ThumbnailEngine,
    image: str | Path,
    preset_names: Iterable[str],
) -> Picture:
    """Describe a full picture element; the fallback points at the original image."""
    return Picture(
        src=engine.resolver.resolve_relative(image),
        sources=build_picture_sources(engine, image, preset_names),
    )
