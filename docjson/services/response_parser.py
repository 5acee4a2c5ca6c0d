"""Normalization of Responses API bodies.

The provider has returned the answer text in two shapes over time: a flat
``output_text`` list, and nested ``output[].content[].text`` items. A
top-level ``error`` object may also appear on a 2xx response. The body is
reduced to exactly one of :class:`ErrorEnvelope`, :class:`FlatText` or
:class:`NestedOutputs`, checked in that order.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

from docjson.core.errors import ProtocolError


@dataclass(frozen=True)
class ErrorEnvelope:
    """Top-level error object; ``message`` is its verbatim JSON."""

    message: str


@dataclass(frozen=True)
class FlatText:
    text: str


@dataclass(frozen=True)
class NestedOutputs:
    """First non-blank text among the nested output items ("" if none)."""

    text: str


ParsedOutput = Union[ErrorEnvelope, FlatText, NestedOutputs]


@dataclass(frozen=True)
class ResponseUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cached_input_tokens: int = 0
    reasoning_tokens: Optional[int] = None


def load_body(raw: str) -> dict[str, Any]:
    """Decode a 2xx body; anything but a JSON object is a protocol error."""
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ProtocolError(f"OpenAI returned a non-JSON response: {e}")
    if not isinstance(body, dict):
        raise ProtocolError("OpenAI returned an unexpected response shape.")
    return body


def parse_output(body: dict[str, Any]) -> ParsedOutput:
    error = body.get("error")
    if error is not None:
        return ErrorEnvelope(json.dumps(error, ensure_ascii=False))

    flat = body.get("output_text")
    if isinstance(flat, str):
        flat = [flat]
    if isinstance(flat, list) and flat and isinstance(flat[0], str):
        return FlatText(flat[0])

    return NestedOutputs(_first_nested_text(body.get("output")))


def _first_nested_text(output: Any) -> str:
    if not isinstance(output, list):
        return ""
    for item in output:
        if not isinstance(item, dict):
            continue
        for entry in item.get("content") or []:
            if not isinstance(entry, dict):
                continue
            text = entry.get("text")
            if isinstance(text, str) and text.strip():
                return text
    return ""


def _count(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return max(0, int(value))


def parse_usage(body: dict[str, Any]) -> ResponseUsage:
    """Token counts; total defers to the provider value when reported."""
    usage = body.get("usage")
    if not isinstance(usage, dict):
        return ResponseUsage()

    input_tokens = _count(usage.get("input_tokens")) or 0
    output_tokens = _count(usage.get("output_tokens")) or 0
    total = _count(usage.get("total_tokens"))

    input_details = usage.get("input_tokens_details") or {}
    output_details = usage.get("output_tokens_details") or {}
    cached = _count(input_details.get("cached_tokens")) if isinstance(input_details, dict) else None
    reasoning = (
        _count(output_details.get("reasoning_tokens")) if isinstance(output_details, dict) else None
    )

    return ResponseUsage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=total if total is not None else input_tokens + output_tokens,
        cached_input_tokens=cached or 0,
        reasoning_tokens=reasoning,
    )


__all__ = [
    "ErrorEnvelope",
    "FlatText",
    "NestedOutputs",
    "ParsedOutput",
    "ResponseUsage",
    "load_body",
    "parse_output",
    "parse_usage",
]
