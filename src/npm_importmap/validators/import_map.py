"""Validate an import map document against the import map JSON schema."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator, ValidationError

from ..errors import ImportMapValidationError

_SPECIFIER_MAP = {
    "type": "object",
    "additionalProperties": {"type": "string", "minLength": 1},
}

IMPORT_MAP_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Import map",
    "type": "object",
    "required": ["imports", "scopes"],
    "additionalProperties": False,
    "properties": {
        "imports": _SPECIFIER_MAP,
        "scopes": {
            "type": "object",
            "propertyNames": {"pattern": "/$"},
            "additionalProperties": {**_SPECIFIER_MAP, "minProperties": 1},
        },
    },
}


def _describe(error: ValidationError) -> str:
    return f"  {error.json_path}: {error.message}"


def validate_import_map(document: dict[str, Any]) -> None:
    validator = Draft202012Validator(IMPORT_MAP_SCHEMA)
    problems = sorted(_describe(error) for error in validator.iter_errors(document))
    if problems:
        raise ImportMapValidationError("Import map failed validation:\n" + "\n".join(problems))
