"""Sequential file upload to the OpenAI Files API."""

from __future__ import annotations

import json
import logging
from typing import Sequence

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from docjson.core.errors import ProtocolError, UpstreamError
from docjson.schemas.api import FilePart, FileProvenance
from docjson.services.cancellation import CancellationScope

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_PURPOSE = "assistants"


class FileUploader:
    """Uploads files one at a time, stopping at the first failure.

    Files uploaded before a failure stay on the provider side; there is no
    rollback.
    """

    def __init__(self, client: AsyncOpenAI, purpose: str = DEFAULT_UPLOAD_PURPOSE):
        self.client = client
        self.purpose = purpose

    async def upload_all(
        self, files: Sequence[FilePart], scope: CancellationScope
    ) -> list[FileProvenance]:
        """Upload ``files`` in order and return their provenance in the same order."""
        uploaded: list[FileProvenance] = []
        for index, part in enumerate(files, start=1):
            scope.raise_if_cancelled()
            provenance = await self.upload_one(part, scope)
            logger.info(
                "Uploaded file %d/%d %s as %s (%d bytes)",
                index,
                len(files),
                part.file_name,
                provenance.file_id,
                provenance.size_bytes,
            )
            uploaded.append(provenance)

        scope.raise_if_cancelled()
        return uploaded

    async def upload_one(self, part: FilePart, scope: CancellationScope) -> FileProvenance:
        """Upload a single file and read the provider-assigned id.

        Raises:
            UpstreamError: Non-2xx status or transport failure.
            ProtocolError: 2xx response without a usable file id.
        """
        try:
            raw = await scope.run(
                self.client.files.with_raw_response.create(
                    file=(part.file_name, part.bytes),
                    purpose=self.purpose,
                )
            )
        except APIStatusError as e:
            raise UpstreamError(e.status_code, e.response.text)
        except APIConnectionError as e:
            if scope.past_threshold():
                raise scope.abort_error() from e
            raise UpstreamError(502, f"Upload failed: {e}")

        try:
            body = json.loads(raw.http_response.text)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"OpenAI returned an unreadable file upload response: {e}")

        file_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(file_id, str) or not file_id.strip():
            raise ProtocolError("OpenAI did not return a file id.")

        content_type = body.get("content_type") or body.get("mime_type")
        return FileProvenance(
            file_name=part.file_name,
            file_id=file_id,
            size_bytes=len(part.bytes),
            content_type=content_type if isinstance(content_type, str) else None,
        )


__all__ = ["DEFAULT_UPLOAD_PURPOSE", "FileUploader"]
