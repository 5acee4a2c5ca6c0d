"""Output schema parsing and Responses API payload construction."""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from docjson.core.errors import ValidationError

FALLBACK_MODEL = "gpt-4.1-mini"
DEFAULT_SCHEMA_NAME = "schema"

SCHEMA_INSTRUCTION = "Output JSON only. Use the provided JSON schema."
JSON_OBJECT_INSTRUCTION = "Output JSON only. Return a single JSON object."


def parse_schema(json_schema: Optional[str]) -> Optional[Any]:
    """Parse the caller's JSON schema.

    Returns None when no schema was supplied, which selects free-form
    JSON-object output.

    Raises:
        ValidationError: The schema is not valid JSON.
    """
    if json_schema is None or not json_schema.strip():
        return None
    try:
        return json.loads(json_schema)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON schema: {e}")


def resolve_model(requested: Optional[str], default: Optional[str] = None) -> str:
    """Request override, then configured default, then the fallback constant."""
    for candidate in (requested, default):
        if candidate and candidate.strip():
            return candidate.strip()
    return FALLBACK_MODEL


def build_payload(
    *,
    model: str,
    prompt: str,
    file_ids: Sequence[str],
    schema: Optional[Any] = None,
    schema_name: Optional[str] = None,
) -> dict[str, Any]:
    """Build a single-turn Responses API request.

    Content order is: mode instruction, user prompt, then one ``input_file``
    entry per uploaded file in upload order.
    """
    content: list[dict[str, Any]] = [
        {
            "type": "input_text",
            "text": SCHEMA_INSTRUCTION if schema is not None else JSON_OBJECT_INSTRUCTION,
        },
        {"type": "input_text", "text": prompt},
    ]
    content.extend({"type": "input_file", "file_id": file_id} for file_id in file_ids)

    if schema is not None:
        output_format = {
            "type": "json_schema",
            "name": schema_name if schema_name and schema_name.strip() else DEFAULT_SCHEMA_NAME,
            "strict": True,
            "schema": schema,
        }
    else:
        output_format = {"type": "json_object"}

    return {
        "model": model,
        "input": [{"role": "user", "content": content}],
        "text": {"format": output_format},
    }


__all__ = [
    "DEFAULT_SCHEMA_NAME",
    "FALLBACK_MODEL",
    "JSON_OBJECT_INSTRUCTION",
    "SCHEMA_INSTRUCTION",
    "build_payload",
    "parse_schema",
    "resolve_model",
]
