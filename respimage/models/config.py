"""Global configuration for thumbnail generation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_CACHE_DURATION = 86400 * 30
DEFAULT_TARGET_PATH = "@webroot/thumbnails/{name}"


class ResponsiveImageConfig(BaseModel):
    """Global options plus the raw preset definitions.

    Presets are kept as raw mappings here; they are validated when the
    preset registry materializes them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    cache_enabled: bool = Field(default=True, description="Cache source image metadata")
    cache_duration: int = Field(
        default=DEFAULT_CACHE_DURATION, ge=0, description="Metadata cache TTL in seconds"
    )
    cache_busting_enabled: bool = Field(
        default=True, description="Append ?v=<mtime> to thumbnail references"
    )
    default_quality: int = Field(default=80, ge=1, le=100, description="Quality when a preset sets 0")
    default_target_path: str = Field(
        default=DEFAULT_TARGET_PATH, description="Target directory template for presets"
    )
    cache_dir: Path | None = Field(
        default=None, description="Directory for the persistent metadata cache"
    )
    aliases: dict[str, str] = Field(
        default_factory=dict, description="Path aliases, e.g. @webroot and @web"
    )
    presets: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Map of preset name -> raw preset configuration"
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "ResponsiveImageConfig":
        """Load configuration from a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        config = cls.model_validate(data)
        # Relative filesystem paths in the file are relative to the file itself
        base = path.parent
        for alias, value in config.aliases.items():
            if alias.lstrip("@") == "webroot" and not Path(value).is_absolute():
                config.aliases[alias] = str(base / value)
        if config.cache_dir is not None and not config.cache_dir.is_absolute():
            config.cache_dir = base / config.cache_dir
        return config
