"""Alias-aware path resolution and ``{field}`` template substitution."""

from __future__ import annotations

import os
import posixpath
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from respimage.errors import UnknownAliasError

WEBROOT_ALIAS = "@webroot"
WEB_ALIAS = "@web"

_ALIAS_RE = re.compile(r"^(@[A-Za-z0-9_\-]+)(?=/|$)")
_TOKEN_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")


def _normalize_url_path(path: str) -> str:
    if not path:
        return path
    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def _swap_alias(path: str, source: str, target: str) -> str:
    """Replace a leading ``source`` alias with ``target``."""
    if path == source or path.startswith(source + "/"):
        return target + path[len(source):]
    return path


class PathResolver:
    """Resolves aliased paths to filesystem paths and public references.

    ``@webroot`` is the directory that is served to clients and ``@web`` is the
    public URL base for the same directory. Both are interchangeable in
    configured paths: filesystem resolution maps ``@web`` to ``@webroot`` and
    reference resolution maps ``@webroot`` back to ``@web``.
    """

    def __init__(self, aliases: Mapping[str, str | Path] | None = None) -> None:
        self.aliases: dict[str, str] = {WEBROOT_ALIAS: "web", WEB_ALIAS: ""}
        for alias, value in (aliases or {}).items():
            self.set_alias(alias, value)

    def set_alias(self, alias: str, value: str | Path) -> None:
        """Define or redefine an alias."""
        if not alias.startswith("@"):
            alias = "@" + alias
        self.aliases[alias] = str(value)

    def expand(self, path: str) -> str:
        """Expand a leading alias, leaving other paths untouched."""
        match = _ALIAS_RE.match(path)
        if match is None:
            return path
        alias = match.group(1)
        if alias not in self.aliases:
            raise UnknownAliasError(alias)
        base = self.aliases[alias]
        rest = path[match.end():]
        if not rest:
            return base
        return base.rstrip("/") + rest

    def resolve_absolute(self, path: str | Path, follow_symlinks: bool = True) -> Path | None:
        """Resolve a path on the filesystem.

        With ``follow_symlinks`` the real path is returned only if it exists,
        otherwise ``None``. Without it the normalized absolute path is
        returned whether or not anything exists there.
        """
        expanded = self.expand(_swap_alias(str(path), WEB_ALIAS, WEBROOT_ALIAS))
        absolute = os.path.normpath(os.path.abspath(expanded))
        if not follow_symlinks:
            return Path(absolute)
        try:
            return Path(absolute).resolve(strict=True)
        except (FileNotFoundError, NotADirectoryError):
            return None

    def resolve_relative(self, path: str | Path) -> str:
        """Resolve a path to its public reference form."""
        expanded = self.expand(_swap_alias(str(path), WEBROOT_ALIAS, WEB_ALIAS))
        if not expanded:
            return "/"
        parts = urlsplit(expanded.replace("\\", "/"))
        if parts.scheme and parts.netloc:
            return urlunsplit(parts._replace(path=_normalize_url_path(parts.path)))
        return _normalize_url_path(expanded.replace("\\", "/"))

    @staticmethod
    def substitute(template: str, fields: Mapping[str, Any]) -> str:
        """Replace ``{key}`` placeholders in a single pass.

        Placeholders without an entry in ``fields`` are left as they are.
        Substituted values are never scanned again.
        """

        def replace(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in fields:
                return match.group(0)
            value = fields[key]
            return "" if value is None else str(value)

        return _TOKEN_RE.sub(replace, template)
