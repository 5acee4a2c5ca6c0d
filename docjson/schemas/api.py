"""API request and response models for the extraction endpoint."""

import base64
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


def _decode_base64(value):
    # JSON carries bytes as base64 text; Python callers may pass raw bytes
    if isinstance(value, str):
        return base64.b64decode(value, validate=True)
    return value


FileBytes = Annotated[
    bytes,
    BeforeValidator(_decode_base64),
    PlainSerializer(lambda value: base64.b64encode(value).decode("ascii"), when_used="json"),
]


class ApiModel(BaseModel):
    """Base model speaking camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FilePart(ApiModel):
    """One submitted file. Bytes travel base64-encoded in JSON."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    bytes: FileBytes


class ExtractionRequest(ApiModel):
    """Extraction request: prompt, ordered files and optional output schema."""

    prompt: str = ""
    files: list[FilePart] = Field(default_factory=list)
    json_schema: Optional[str] = None
    schema_name: Optional[str] = None
    model: Optional[str] = None


class RunDetails(ApiModel):
    """Telemetry for a completed extraction."""

    model: str
    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)
    total_tokens: int = Field(ge=0)
    latency_ms: int = Field(ge=0)
    estimated_cost_usd: float = Field(ge=0.0)


class Usage(ApiModel):
    """Token usage as reported by the provider."""

    input_tokens: int = Field(ge=0)
    output_tokens: int = Field(ge=0)
    total_tokens: int = Field(ge=0)
    reasoning_tokens: Optional[int] = None


class FileProvenance(ApiModel):
    """Links a submitted file to the id the provider assigned it."""

    file_name: str
    file_id: str
    size_bytes: int
    content_type: Optional[str] = None


class ExtractionResponse(ApiModel):
    """Extraction result. On error only ``error`` is populated."""

    is_error: bool
    data: Optional[str] = None
    error: Optional[str] = None
    details: Optional[RunDetails] = None
    usage: Optional[Usage] = None
    files: Optional[list[FileProvenance]] = None

    @classmethod
    def failure(cls, message: str) -> "ExtractionResponse":
        """Error response carrying only ``message``."""
        return cls(is_error=True, error=message)

    def to_wire(self) -> dict:
        """Serialize by alias, leaving out absent fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
