"""JSON schemas for the YAML documents kept in the store directory."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from .errors import ConfigFileError

_TEXT = {"type": ["string", "null"]}
_NUMBER = {"type": ["number", "string"]}

CONFIG_SCHEMA: Mapping[str, Any] = {
    "type": "object",
    "properties": {
        "company": {
            "type": ["object", "null"],
            "properties": {
                "name": _TEXT,
                "address": _TEXT,
                "email": _TEXT,
                "phone": _TEXT,
                "id": _TEXT,
            },
        },
        "invoice": {
            "type": ["object", "null"],
            "properties": {
                "prefix": {"type": "string", "minLength": 1},
                "starting_number": {"type": ["string", "integer", "null"]},
                "payment_terms": _TEXT,
                "due_days": {"type": "integer", "minimum": 0},
                "notes": _TEXT,
            },
        },
        "auto_commit": {"type": ["boolean", "null"]},
        "skip_update_check": {"type": ["boolean", "null"]},
    },
}

CUSTOMERS_SCHEMA: Mapping[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "properties": {
            "name": _TEXT,
            "address": _TEXT,
            "email": _TEXT,
            "phone": _TEXT,
            "id": _TEXT,
        },
    },
}

PRODUCTS_SCHEMA: Mapping[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "properties": {
            "name": _TEXT,
            "sku": _TEXT,
            "price": _NUMBER,
        },
        "required": ["price"],
    },
}

INVOICE_SCHEMA: Mapping[str, Any] = {
    "type": "object",
    "properties": {
        "invoice_number": {"type": "string"},
        "customer": {"type": "string"},
        "items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "product": {"type": "string"},
                    "quantity": {"type": "integer"},
                    "unit_price": _NUMBER,
                    "total": _NUMBER,
                    "discount": {"type": ["integer", "null"]},
                },
                "required": ["product", "quantity", "unit_price", "total"],
            },
        },
        "total": _NUMBER,
    },
    "required": ["invoice_number", "date", "customer", "items", "total"],
}


def validate_document(data: Any, schema: Mapping[str, Any], path: Path) -> None:
    """Raise :class:`ConfigFileError` when ``data`` does not match ``schema``."""

    error = best_match(Draft202012Validator(schema).iter_errors(data))
    if error is None:
        return
    location = ".".join(str(part) for part in error.absolute_path) or "<root>"
    raise ConfigFileError(f"parsing {path}: {location}: {error.message}")


__all__ = [
    "CONFIG_SCHEMA",
    "CUSTOMERS_SCHEMA",
    "PRODUCTS_SCHEMA",
    "INVOICE_SCHEMA",
    "validate_document",
]
