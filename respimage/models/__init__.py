"""Data models for respimage."""

from respimage.models.config import ResponsiveImageConfig
from respimage.models.metadata import SourceMetadata
from respimage.models.preset import Preset, PresetConfig

__all__ = [
    "Preset",
    "PresetConfig",
    "ResponsiveImageConfig",
    "SourceMetadata",
]
