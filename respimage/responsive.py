"""Main ResponsiveImage class - unified interface for preset thumbnails."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from respimage.models.config import ResponsiveImageConfig
from respimage.models.preset import Preset
from respimage.paths import PathResolver
from respimage.picture import Picture, PictureSource, build_picture, build_picture_sources
from respimage.registry import PresetRegistry
from respimage.thumbnails import (
    BatchResult,
    BatchRunner,
    DiskMetadataCache,
    MemoryMetadataCache,
    MetadataCache,
    NullMetadataCache,
    ThumbnailEngine,
)
from respimage.thumbnails.batch import ProgressCallback


class ResponsiveImage:
    """Wires resolver, cache, registry, engine and batch runner from configuration."""

    def __init__(self, config: ResponsiveImageConfig | None = None) -> None:
        self.config = config or ResponsiveImageConfig()

        self._resolver: PathResolver | None = None
        self._cache: MetadataCache | None = None
        self._registry: PresetRegistry | None = None
        self._engine: ThumbnailEngine | None = None
        self._batch: BatchRunner | None = None

    @classmethod
    def from_yaml(cls, path: str | Path) -> ResponsiveImage:
        return cls(ResponsiveImageConfig.from_yaml(Path(path)))

    @property
    def resolver(self) -> PathResolver:
        if self._resolver is None:
            self._resolver = PathResolver(self.config.aliases)
        return self._resolver

    @property
    def cache(self) -> MetadataCache:
        if self._cache is None:
            if not self.config.cache_enabled:
                self._cache = NullMetadataCache()
            elif self.config.cache_dir is not None:
                self._cache = DiskMetadataCache(self.config.cache_dir)
            else:
                self._cache = MemoryMetadataCache()
        return self._cache

    @property
    def registry(self) -> PresetRegistry:
        if self._registry is None:
            self._registry = PresetRegistry(
                self.resolver,
                self.config.presets,
                default_target_path=self.config.default_target_path,
            )
        return self._registry

    @property
    def engine(self) -> ThumbnailEngine:
        if self._engine is None:
            self._engine = ThumbnailEngine(
                self.registry,
                self.resolver,
                cache=self.cache,
                default_quality=self.config.default_quality,
                cache_duration=self.config.cache_duration,
                cache_busting_enabled=self.config.cache_busting_enabled,
            )
        return self._engine

    @property
    def batch(self) -> BatchRunner:
        if self._batch is None:
            self._batch = BatchRunner(self.registry, self.engine, self.resolver)
        return self._batch

    def get_thumbnail(self, file: str | Path, preset_name: str, force: bool = False) -> str:
        return self.engine.get_thumbnail(file, preset_name, force=force)

    def get_preset(self, name: str) -> Preset:
        return self.registry.get_preset(name)

    def get_presets(self) -> dict[str, Preset]:
        return self.registry.get_presets()

    def create_preset(self, name: str, raw: Mapping[str, Any]) -> Preset:
        return self.registry.create_preset(name, raw)

    def picture_sources(self, image: str | Path, preset_names: Iterable[str]) -> list[PictureSource]:
        return build_picture_sources(self.engine, image, preset_names)

    def picture(self, image: str | Path, preset_names: Iterable[str]) -> Picture:
        return build_picture(self.engine, image, preset_names)

    def generate(
        self,
        preset_name: str | None = None,
        force: bool = True,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        return self.batch.generate(preset_name, force=force, progress_callback=progress_callback)

    def flush(
        self,
        preset_name: str | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        return self.batch.flush(preset_name, progress_callback=progress_callback)
