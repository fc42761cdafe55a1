"""Preset models: raw preset configuration and the validated, immutable preset."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from respimage.errors import InvalidPresetConfigError
from respimage.paths import PathResolver

UNSET_BREAKPOINT = -1


def _format_errors(exc: ValidationError) -> list[str]:
    """Flatten a pydantic error into ``"<field>: <message>"`` lines."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "preset"
        message = error["msg"].removeprefix("Value error, ")
        errors.append(f"{field}: {message}")
    return errors


class PresetConfig(BaseModel):
    """Raw preset configuration as written in the config file.

    Keys are accepted in camelCase (``srcPath``, ``breakpointMin``) as well as
    snake_case. Unknown keys are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    name: str = Field(..., min_length=1, description="Unique preset name")
    src_path: str = Field(..., min_length=1, description="Source directory (may be aliased)")
    target_path: str | None = Field(default=None, description="Target directory template")
    target_extension: str | None = Field(default=None, description="Output extension override")
    width: int = Field(default=0, ge=0, description="Target width in pixels, 0 = derived")
    height: int = Field(
        default=0, ge=0, validate_default=True, description="Target height in pixels, 0 = derived"
    )
    quality: int = Field(default=0, ge=0, le=100, description="Output quality, 0 = default")
    breakpoint_min: int = Field(default=UNSET_BREAKPOINT, ge=UNSET_BREAKPOINT)
    breakpoint_max: int = Field(
        default=UNSET_BREAKPOINT, ge=UNSET_BREAKPOINT, validate_default=True
    )
    cache_busting: bool = Field(default=True, description="Append ?v=<mtime> to references")

    @field_validator("width", "height", "quality", mode="before")
    @classmethod
    def _none_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("breakpoint_min", "breakpoint_max", mode="before")
    @classmethod
    def _none_is_unset(cls, value: Any) -> Any:
        return UNSET_BREAKPOINT if value is None else value

    @field_validator("target_path", "target_extension")
    @classmethod
    def _empty_is_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("target_extension")
    @classmethod
    def _strip_dot(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.lstrip(".") or None

    @field_validator("height")
    @classmethod
    def _require_dimension(cls, value: int, info: ValidationInfo) -> int:
        if "width" not in info.data:
            return value
        if value == 0 and info.data["width"] == 0:
            raise ValueError("either width or height must be greater than 0")
        return value

    @field_validator("breakpoint_max")
    @classmethod
    def _require_breakpoint(cls, value: int, info: ValidationInfo) -> int:
        if "breakpoint_min" not in info.data:
            return value
        if value == UNSET_BREAKPOINT and info.data["breakpoint_min"] == UNSET_BREAKPOINT:
            raise ValueError("either breakpointMin or breakpointMax must be set")
        return value

    def template_fields(self) -> dict[str, str]:
        """Values available as ``{field}`` tokens in target path templates."""
        return {
            "name": self.name,
            "srcPath": self.src_path,
            "targetExtension": self.target_extension or "",
            "width": str(self.width),
            "height": str(self.height),
            "quality": str(self.quality),
            "breakpointMin": str(self.breakpoint_min),
            "breakpointMax": str(self.breakpoint_max),
            "cacheBusting": "1" if self.cache_busting else "0",
        }


class Preset(BaseModel):
    """A validated thumbnail preset.

    ``target_path`` holds the resolved target directory template: placeholders
    are substituted once, when the preset is built, and never again.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    src_path: str
    target_path: str
    target_extension: str | None = None
    width: int = 0
    height: int = 0
    quality: int = 0
    breakpoint_min: int = UNSET_BREAKPOINT
    breakpoint_max: int = UNSET_BREAKPOINT
    cache_busting: bool = True

    @classmethod
    def from_config(
        cls,
        name: str,
        raw: Mapping[str, Any],
        default_target_path: str,
    ) -> Preset:
        """Validate raw configuration and build the preset.

        Raises:
            InvalidPresetConfigError: if the configuration is invalid
        """
        data = {**raw, "name": name}
        try:
            config = PresetConfig.model_validate(data)
        except ValidationError as e:
            raise InvalidPresetConfigError(name, _format_errors(e)) from e

        template = config.target_path or default_target_path
        target_path = PathResolver.substitute(template, config.template_fields())

        return cls(
            name=config.name,
            src_path=config.src_path,
            target_path=target_path,
            target_extension=config.target_extension,
            width=config.width,
            height=config.height,
            quality=config.quality,
            breakpoint_min=config.breakpoint_min,
            breakpoint_max=config.breakpoint_max,
            cache_busting=config.cache_busting,
        )

    @property
    def has_breakpoint_min(self) -> bool:
        return self.breakpoint_min != UNSET_BREAKPOINT

    @property
    def has_breakpoint_max(self) -> bool:
        return self.breakpoint_max != UNSET_BREAKPOINT
