"""Preset registry.

Holds the raw preset definitions from configuration and turns them into
validated ``Preset`` models on first access.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from respimage.errors import DuplicatePresetError, ThumbnailIOError, UnknownPresetError
from respimage.models.config import DEFAULT_TARGET_PATH
from respimage.models.preset import Preset
from respimage.paths import PathResolver

logger = logging.getLogger(__name__)


class PresetRegistry:
    """Registry of named thumbnail presets.

    A registered name can never be replaced. Presets from the raw
    configuration are created lazily by ``ensure_materialized()``, which every
    public accessor calls first.
    """

    def __init__(
        self,
        resolver: PathResolver,
        raw_presets: Mapping[str, Mapping[str, Any]] | None = None,
        default_target_path: str = DEFAULT_TARGET_PATH,
    ) -> None:
        """Initialize registry.

        Args:
            resolver: Resolver used to locate preset target directories
            raw_presets: Map of preset name -> raw preset configuration
            default_target_path: Template used by presets without a targetPath
        """
        self.resolver = resolver
        self.default_target_path = default_target_path
        self._raw_presets = dict(raw_presets or {})
        self._presets: dict[str, Preset] = {}
        self._materialized = False

    def ensure_materialized(self) -> None:
        """Create all configured presets, once."""
        if self._materialized:
            return
        for name, raw in self._raw_presets.items():
            if name.strip() in self._presets:
                continue
            self._register(name, raw)
        self._materialized = True
        logger.debug(f"Materialized {len(self._presets)} presets")

    def get_preset(self, name: str) -> Preset:
        """Get a preset by name."""
        self.ensure_materialized()
        preset = self._presets.get(name)
        if preset is None:
            raise UnknownPresetError(name)
        return preset

    def get_presets(self) -> dict[str, Preset]:
        """Get all presets, keyed by name."""
        self.ensure_materialized()
        return dict(self._presets)

    def has_preset(self, name: str) -> bool:
        self.ensure_materialized()
        return name in self._presets

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has_preset(name)

    def __len__(self) -> int:
        self.ensure_materialized()
        return len(self._presets)

    def create_preset(self, name: str, raw: Mapping[str, Any]) -> Preset:
        """Validate, register and prepare the target directory of a preset.

        Raises:
            DuplicatePresetError: if the name is already registered
            InvalidPresetConfigError: if the configuration is invalid
            ThumbnailIOError: if the target directory cannot be created
        """
        self.ensure_materialized()
        return self._register(name, raw)

    def _register(self, name: str, raw: Mapping[str, Any]) -> Preset:
        # Keyed by the stripped name, matching Preset.name
        name = name.strip()
        if name in self._presets:
            raise DuplicatePresetError(name)

        preset = Preset.from_config(name, raw, self.default_target_path)
        self._presets[preset.name] = preset
        logger.info(f"Registered preset {name} -> {preset.target_path}")

        target = self.resolver.resolve_absolute(preset.target_path, follow_symlinks=False)
        if not target.exists():
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ThumbnailIOError(
                    f"Failed to create directory {target} for preset `{name}`: {e}"
                ) from e
            logger.debug(f"Created target directory {target}")

        return preset
