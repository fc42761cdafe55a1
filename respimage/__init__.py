"""respimage - Preset-driven responsive image thumbnails with caching."""

from respimage.errors import (
    DuplicatePresetError,
    InvalidPresetConfigError,
    ResponsiveImageError,
    SourceNotFoundError,
    ThumbnailIOError,
    UnknownAliasError,
    UnknownPresetError,
)
from respimage.models import Preset, ResponsiveImageConfig, SourceMetadata
from respimage.paths import PathResolver
from respimage.registry import PresetRegistry
from respimage.responsive import ResponsiveImage
from respimage.thumbnails import BatchRunner, ThumbnailEngine

__version__ = "0.1.0"
__all__ = [
    "BatchRunner",
    "DuplicatePresetError",
    "InvalidPresetConfigError",
    "PathResolver",
    "Preset",
    "PresetRegistry",
    "ResponsiveImage",
    "ResponsiveImageConfig",
    "ResponsiveImageError",
    "SourceMetadata",
    "SourceNotFoundError",
    "ThumbnailEngine",
    "ThumbnailIOError",
    "UnknownAliasError",
    "UnknownPresetError",
]
