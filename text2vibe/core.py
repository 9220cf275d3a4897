"""Core utilities for export paths and file naming."""

from __future__ import annotations

import re
from pathlib import Path

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class PathTraversalError(ValueError):
    """Raised when a path attempts to traverse outside the allowed scope."""


def normalize_resource_path(value: str) -> str:
    """Normalize *value* to an absolute path and reject traversal components."""

    if not value:
        raise ValueError("path must be a non-empty string")

    candidate = Path(value).expanduser()
    if any(part == ".." for part in candidate.parts):
        raise PathTraversalError("path may not contain '..' segments")

    if candidate.is_absolute():
        normalized = candidate
    else:
        normalized = (Path.cwd() / candidate)

    return str(normalized.resolve(strict=False))


def sanitize_filename(text: str, fallback: str) -> str:
    """Replace characters unsafe in a file name, keeping case and spacing."""
    candidate = _UNSAFE_FILENAME_CHARS.sub("_", (text or "").strip())
    candidate = candidate.rstrip(". ")
    return candidate or fallback


__all__ = ["PathTraversalError", "normalize_resource_path", "sanitize_filename"]
