"""Exception types raised by respimage."""

from __future__ import annotations


class ResponsiveImageError(Exception):
    """Base class for all respimage errors."""


class UnknownPresetError(ResponsiveImageError, LookupError):
    """Raised when a preset name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Thumbnail preset `{name}` does not exist.")
        self.name = name


class DuplicatePresetError(ResponsiveImageError, ValueError):
    """Raised when a preset name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Thumbnail preset `{name}` already exists and can't be overwritten."
        )
        self.name = name


class InvalidPresetConfigError(ResponsiveImageError, ValueError):
    """Raised when a raw preset configuration fails validation.

    ``errors`` holds one ``"<field>: <message>"`` entry per problem.
    """

    def __init__(self, preset: str, errors: list[str]) -> None:
        message = f"Thumbnail preset `{preset}` has invalid configuration:\n" + "\n".join(errors)
        super().__init__(message)
        self.preset = preset
        self.errors = errors


class SourceNotFoundError(ResponsiveImageError, FileNotFoundError):
    """Raised when a source image is missing or unreadable."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"File `{path}` does not exist."
        if reason:
            message = f"File `{path}` could not be read: {reason}"
        super().__init__(message)
        self.path = path


class ThumbnailIOError(ResponsiveImageError, OSError):
    """Raised when a directory cannot be created or a thumbnail cannot be written."""


class UnknownAliasError(ResponsiveImageError, ValueError):
    """Raised when a path uses an alias that has not been defined."""

    def __init__(self, alias: str) -> None:
        super().__init__(f"Invalid path alias: {alias}")
        self.alias = alias
