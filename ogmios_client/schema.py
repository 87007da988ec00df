from __future__ import annotations

from typing import Any, Dict

import jsonschema  # type: ignore[import-untyped]

from ogmios_client.errors import DecodingError, EncodingError

_FAULT = {
    "type": "object",
    "required": ["code", "string"],
    "properties": {
        "code": {"type": "string"},
        "string": {"type": "string"},
    },
}

RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["type", "version", "servicename"],
    "properties": {
        "type": {"type": "string"},
        "version": {"type": "string"},
        "servicename": {"type": "string"},
        "methodname": {"type": ["string", "null"]},
        "fault": {"anyOf": [{"type": "null"}, _FAULT]},
    },
}

_EVALUATE_ARGS = {
    "type": "object",
    "required": ["evaluate", "additionalUtxoSet"],
    "properties": {
        "evaluate": {"type": "string"},
        "additionalUtxoSet": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["transaction_id", "index"],
                "properties": {
                    "transaction_id": {"type": "string"},
                    "index": {"type": "integer", "minimum": 0},
                },
            },
        },
    },
}

_SUBMIT_ARGS = {
    "type": "object",
    "required": ["submit"],
    "properties": {"submit": {"type": "string"}},
}

REQUEST_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["type", "version", "servicename", "methodname", "args"],
    "properties": {
        "type": {"type": "string"},
        "version": {"type": "string"},
        "servicename": {"type": "string"},
        "methodname": {"type": "string"},
        "args": {"oneOf": [_EVALUATE_ARGS, _SUBMIT_ARGS]},
    },
}


def validate(instance: Any, schema: Dict[str, Any]) -> None:
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as exc:
        raise DecodingError("payload does not match envelope shape", exc.message) from exc
    except RecursionError as exc:
        raise DecodingError("payload is nested too deeply") from exc


def validate_outgoing(instance: Any, schema: Dict[str, Any]) -> None:
    """Like ``validate`` but for envelopes about to be sent."""
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as exc:
        raise EncodingError(f"envelope does not match wire shape: {exc.message}") from exc
