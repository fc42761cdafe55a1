"""Thumbnail generation and caching module."""

from respimage.thumbnails.batch import BatchResult, BatchRunner, list_image_files
from respimage.thumbnails.cache import (
    DiskMetadataCache,
    MemoryMetadataCache,
    MetadataCache,
    NullMetadataCache,
)
from respimage.thumbnails.engine import ThumbnailEngine
from respimage.thumbnails.renderer import ThumbnailRenderer, read_source_metadata

__all__ = [
    "BatchResult",
    "BatchRunner",
    "DiskMetadataCache",
    "MemoryMetadataCache",
    "MetadataCache",
    "NullMetadataCache",
    "ThumbnailEngine",
    "ThumbnailRenderer",
    "list_image_files",
    "read_source_metadata",
]
