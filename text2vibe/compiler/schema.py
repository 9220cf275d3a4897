"""JSON Schema for Waveform Documents and local validation helpers."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from jsonschema import Draft202012Validator, ValidationError
from referencing import Registry, Resource

_BASE_URI = "https://schemas.text2vibe.dev/he/1.0"

DOCUMENT_SCHEMA_ID = f"{_BASE_URI}/document.schema.json"
EVENT_SCHEMA_ID = f"{_BASE_URI}/event.schema.json"
CURVE_POINT_SCHEMA_ID = f"{_BASE_URI}/curve-point.schema.json"

_LEVEL = {"type": "integer", "minimum": 0, "maximum": 100}
_MILLISECONDS = {"type": "integer", "minimum": 0}

CURVE_POINT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": CURVE_POINT_SCHEMA_ID,
    "type": "object",
    "properties": {
        "Time": _MILLISECONDS,
        "Intensity": {"type": "number", "minimum": 0, "maximum": 1},
        "Frequency": {"type": "integer"},
    },
    "required": ["Time", "Intensity", "Frequency"],
    "additionalProperties": False,
}

EVENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": EVENT_SCHEMA_ID,
    "oneOf": [
        {
            "type": "object",
            "properties": {
                "Type": {"const": "transient"},
                "RelativeTime": _MILLISECONDS,
                "Parameters": {
                    "type": "object",
                    "properties": {"Intensity": _LEVEL, "Frequency": _LEVEL},
                    "required": ["Intensity", "Frequency"],
                    "additionalProperties": False,
                },
            },
            "required": ["Type", "RelativeTime", "Parameters"],
            "additionalProperties": False,
        },
        {
            "type": "object",
            "properties": {
                "Type": {"const": "continuous"},
                "RelativeTime": _MILLISECONDS,
                "Duration": _MILLISECONDS,
                "Parameters": {
                    "type": "object",
                    "properties": {
                        "Intensity": _LEVEL,
                        "Frequency": _LEVEL,
                        "Curve": {
                            "type": "array",
                            "items": {"$ref": CURVE_POINT_SCHEMA_ID},
                            "minItems": 4,
                            "maxItems": 4,
                        },
                    },
                    "required": ["Intensity", "Frequency", "Curve"],
                    "additionalProperties": False,
                },
            },
            "required": ["Type", "RelativeTime", "Duration", "Parameters"],
            "additionalProperties": False,
        },
    ],
}

DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": DOCUMENT_SCHEMA_ID,
    "type": "object",
    "properties": {
        "Metadata": {
            "type": "object",
            "properties": {
                "Version": {"const": 1},
                "Created": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}$"},
                "Description": {"type": "string"},
            },
            "required": ["Version", "Created", "Description"],
        },
        "Pattern": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"Event": {"$ref": EVENT_SCHEMA_ID}},
                "required": ["Event"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["Metadata", "Pattern"],
}


def _build_registry() -> Registry:
    resources = [
        (schema["$id"], Resource.from_contents(schema))
        for schema in (DOCUMENT_SCHEMA, EVENT_SCHEMA, CURVE_POINT_SCHEMA)
    ]
    return Registry().with_resources(resources)


_VALIDATOR = Draft202012Validator(DOCUMENT_SCHEMA, registry=_build_registry())


def validate_document(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate a Waveform Document against the bundled schema."""

    if not isinstance(document, Mapping):
        raise TypeError("document must be a mapping")

    errors = list(_collect_errors(_VALIDATOR.iter_errors(dict(document))))
    if errors:
        return {"ok": False, "reason": "validation_failed", "errors": errors}
    return {"ok": True, "reason": "validation_passed", "errors": []}


def _collect_errors(raw_errors: Iterable[ValidationError]):
    for error in raw_errors:
        yield {
            "message": error.message,
            "path": list(error.absolute_path),
        }


__all__ = [
    "CURVE_POINT_SCHEMA",
    "DOCUMENT_SCHEMA",
    "EVENT_SCHEMA",
    "validate_document",
]
