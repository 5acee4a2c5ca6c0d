"""Wire schemas for the extraction API."""

from docjson.schemas.api import (
    ExtractionRequest,
    ExtractionResponse,
    FilePart,
    FileProvenance,
    RunDetails,
    Usage,
)

__all__ = [
    "ExtractionRequest",
    "ExtractionResponse",
    "FilePart",
    "FileProvenance",
    "RunDetails",
    "Usage",
]
