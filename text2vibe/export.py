"""Export sink for Waveform Documents (``<filename>.he``)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping

from text2vibe.compiler.schema import validate_document
from text2vibe.core import normalize_resource_path, sanitize_filename
from text2vibe.model import VibrationConfig

HE_SUFFIX = ".he"
DEFAULT_EXPORT_NAME = "haptic_effect"

_LOGGER = logging.getLogger(__name__)


class DocumentError(ValueError):
    """Raised when bytes cannot be read back as a Waveform Document."""

    def __init__(self, message: str, *, errors: list | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def serialize_document(document: Mapping[str, Any]) -> bytes:
    """Serialise *document* to UTF-8 JSON with two-space indentation."""
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")


def parse_document(data: bytes | str) -> Dict[str, Any]:
    """Parse and validate serialised Waveform Document *data*."""

    if isinstance(data, bytes):
        data = data.decode("utf-8")
    try:
        loaded = json.loads(data)
    except json.JSONDecodeError as exc:
        raise DocumentError(f"invalid JSON document: {exc}") from exc

    if not isinstance(loaded, dict):
        raise DocumentError("waveform document must decode to a JSON object")

    result = validate_document(loaded)
    if not result["ok"]:
        raise DocumentError("waveform document failed schema validation", errors=result["errors"])
    return loaded


def export_filename(config: VibrationConfig) -> str:
    """Return the ``.he`` file name used when exporting *config*."""
    return sanitize_filename(config.filename, DEFAULT_EXPORT_NAME) + HE_SUFFIX


def write_document(document: Mapping[str, Any], filename: str, directory: str = ".") -> Path:
    """Write *document* as ``filename`` under *directory* and return the path."""

    if os.sep in filename or (os.altsep and os.altsep in filename):
        raise ValueError("filename may not contain path separators")
    if not filename.endswith(HE_SUFFIX):
        filename = f"{filename}{HE_SUFFIX}"

    target_dir = Path(normalize_resource_path(directory))
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_bytes(serialize_document(document))
    _LOGGER.info("Exported waveform document to %s", path)
    return path


__all__ = [
    "DEFAULT_EXPORT_NAME",
    "DocumentError",
    "HE_SUFFIX",
    "export_filename",
    "parse_document",
    "serialize_document",
    "write_document",
]
