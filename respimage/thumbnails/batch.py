"""Batch generation and flushing of preset thumbnails."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from respimage.errors import ResponsiveImageError
from respimage.models.preset import Preset
from respimage.paths import PathResolver
from respimage.registry import PresetRegistry
from respimage.thumbnails.engine import ThumbnailEngine

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif"})

# Called with (preset name, completed, total)
ProgressCallback = Callable[[str, int, int], None]


def list_image_files(directory: Path) -> list[Path]:
    """List image files directly inside a directory (not recursive).

    Extensions are matched case-insensitively. A missing directory is empty.
    """
    if not directory.is_dir():
        return []
    return sorted(
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lstrip(".").lower() in IMAGE_EXTENSIONS
    )


class BatchResult:
    """Result of a batch generate or flush run."""

    def __init__(self) -> None:
        self.processed: dict[str, int] = {}
        self.errors: list[tuple[str, str, str]] = []

    @property
    def total(self) -> int:
        return sum(self.processed.values())

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, preset: str, file: Path | str, error: Exception) -> None:
        self.errors.append((preset, str(file), str(error)))


class BatchRunner:
    """Runs thumbnail generation or flushing over whole presets.

    Presets and files are processed one after another. A failure on one file
    is logged and recorded, and the run carries on with the next file.
    """

    def __init__(
        self,
        registry: PresetRegistry,
        engine: ThumbnailEngine,
        resolver: PathResolver,
        lister: Callable[[Path], list[Path]] = list_image_files,
    ) -> None:
        self.registry = registry
        self.engine = engine
        self.resolver = resolver
        self.lister = lister

    def select_presets(self, preset_name: str | None = None) -> dict[str, Preset]:
        """Presets a run applies to.

        Raises:
            UnknownPresetError: if ``preset_name`` is not registered
        """
        if preset_name is None:
            return self.registry.get_presets()
        return {preset_name: self.registry.get_preset(preset_name)}

    def generate(
        self,
        preset_name: str | None = None,
        force: bool = True,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        """Generate thumbnails for every image in the source directory of each preset."""
        presets = self.select_presets(preset_name)
        result = BatchResult()

        for name, preset in presets.items():
            result.processed[name] = 0
            source_dir = self.resolver.resolve_absolute(preset.src_path)
            if source_dir is None:
                logger.warning(f"Source directory for preset {name} not found: {preset.src_path}")
                result.add_error(name, preset.src_path, FileNotFoundError("source directory not found"))
                continue

            files = self.lister(source_dir)
            logger.info(f"Preset {name}: generating {len(files)} thumbnails")

            for completed, file in enumerate(files, start=1):
                try:
                    self.engine.get_thumbnail(file, name, force=force)
                    result.processed[name] += 1
                except (ResponsiveImageError, OSError) as e:
                    result.add_error(name, file, e)
                    logger.warning(f"Failed to generate thumbnail for {file} ({name}): {e}")

                if progress_callback:
                    progress_callback(name, completed, len(files))

        return result

    def flush(
        self,
        preset_name: str | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> BatchResult:
        """Delete the generated images in the target directory of each preset."""
        presets = self.select_presets(preset_name)
        result = BatchResult()

        for name, preset in presets.items():
            result.processed[name] = 0
            target_dir = self.resolver.resolve_absolute(preset.target_path, follow_symlinks=False)
            files = self.lister(target_dir)
            logger.info(f"Preset {name}: flushing {len(files)} thumbnails")

            for completed, file in enumerate(files, start=1):
                try:
                    file.unlink(missing_ok=True)
                    result.processed[name] += 1
                except OSError as e:
                    result.add_error(name, file, e)
                    logger.warning(f"Failed to delete {file} ({name}): {e}")

                if progress_callback:
                    progress_callback(name, completed, len(files))

        return result
