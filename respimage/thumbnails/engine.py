"""On-demand thumbnail generation for presets."""

from __future__ import annotations

import logging
from pathlib import Path

from respimage.errors import SourceNotFoundError
from respimage.models.config import DEFAULT_CACHE_DURATION
from respimage.models.metadata import SourceMetadata
from respimage.models.preset import Preset
from respimage.paths import PathResolver
from respimage.registry import PresetRegistry
from respimage.thumbnails.cache import MetadataCache, NullMetadataCache
from respimage.thumbnails.renderer import ThumbnailRenderer, read_source_metadata

logger = logging.getLogger(__name__)


class ThumbnailEngine:
    """Creates preset thumbnails on demand and returns their references.

    A thumbnail that already exists on disk is never rebuilt unless forced.
    References carry a ``?v=<source mtime>`` token when cache busting is on,
    so clients refetch whenever the source file changes.
    """

    def __init__(
        self,
        registry: PresetRegistry,
        resolver: PathResolver,
        cache: MetadataCache | None = None,
        renderer: ThumbnailRenderer | None = None,
        default_quality: int = 80,
        cache_duration: int = DEFAULT_CACHE_DURATION,
        cache_busting_enabled: bool = True,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.cache = cache if cache is not None else NullMetadataCache()
        self.renderer = renderer or ThumbnailRenderer()
        self.default_quality = default_quality
        self.cache_duration = cache_duration
        self.cache_busting_enabled = cache_busting_enabled

    def get_thumbnail(self, file: str | Path, preset_name: str, force: bool = False) -> str:
        """Get the reference path of a thumbnail, creating it if needed.

        Args:
            file: Source image path (may be aliased)
            preset_name: Name of the preset to apply
            force: Regenerate even if the thumbnail exists

        Returns:
            Public reference path, optionally with a cache busting token

        Raises:
            UnknownPresetError: if the preset does not exist
            SourceNotFoundError: if the source is missing or unreadable
            ThumbnailIOError: if resizing or writing fails
        """
        preset = self.registry.get_preset(preset_name)
        source = self._resolve_source(file)
        info = self.get_image_info(source)

        target_absolute, reference = self._target_paths(preset, info)

        if force or not target_absolute.exists():
            self._create_thumbnail(source, target_absolute, preset)
        else:
            logger.debug(f"Thumbnail exists, skipping: {target_absolute}")

        if self.cache_busting_enabled and preset.cache_busting:
            return f"{reference}?v={info.modified}"
        return reference

    def target_for(self, file: str | Path, preset_name: str) -> tuple[Path, str]:
        """Get the target file path and its reference without generating anything."""
        preset = self.registry.get_preset(preset_name)
        info = self.get_image_info(self._resolve_source(file))
        return self._target_paths(preset, info)

    def get_image_info(self, file: str | Path) -> SourceMetadata:
        """Get metadata of a source image, using the cache when possible."""
        source = self._resolve_source(file)

        info = self.cache.get(source)
        if info is not None:
            logger.debug(f"Metadata cache hit: {source}")
            return info

        info = read_source_metadata(source)
        self.cache.set(source, info, self.cache_duration)
        return info

    def invalidate(self, file: str | Path) -> bool:
        """Drop the cached metadata of a source image."""
        source = self.resolver.resolve_absolute(file) or self.resolver.resolve_absolute(
            file, follow_symlinks=False
        )
        return self.cache.delete(source)

    def _resolve_source(self, file: str | Path) -> Path:
        source = self.resolver.resolve_absolute(file)
        if source is None:
            raise SourceNotFoundError(str(file))
        return source

    def _target_paths(self, preset: Preset, info: SourceMetadata) -> tuple[Path, str]:
        if preset.target_extension and preset.target_extension != info.ext:
            target_name = f"{info.filename}.{preset.target_extension}"
        else:
            target_name = f"{info.filename}.{info.ext}"

        target = f"{preset.target_path}/{target_name}"
        target_absolute = self.resolver.resolve_absolute(target, follow_symlinks=False)
        return target_absolute, self.resolver.resolve_relative(target)

    def _create_thumbnail(self, source: Path, target: Path, preset: Preset) -> None:
        quality = preset.quality if preset.quality > 0 else self.default_quality
        image = self.renderer.thumbnail(source, preset.width, preset.height)
        self.renderer.save(image, target, quality)
        logger.info(f"Generated thumbnail {target} ({preset.name}, quality {quality})")
