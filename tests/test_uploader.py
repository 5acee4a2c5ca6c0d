"""Tests for sequential file upload."""

import asyncio

import httpx
import pytest

from docjson.core.errors import (
    ProtocolError,
    ProviderTimeoutError,
    RequestCancelledError,
    UpstreamError,
)
from docjson.services.cancellation import CancellationScope
from docjson.services.uploader import FileUploader


@pytest.fixture
def scope(clock):
    return CancellationScope(clock=clock)


class TestUploadAll:
    """Tests for uploading a batch of files."""

    @pytest.mark.asyncio
    async def test_uploads_in_submission_order(self, fake_openai, make_request, scope):
        request = make_request("a.pdf", "b.png", "c.txt")
        uploader = FileUploader(fake_openai.client())

        files = await uploader.upload_all(request.files, scope)

        assert [f.file_name for f in files] == ["a.pdf", "b.png", "c.txt"]
        assert [f.file_id for f in files] == ["file-1", "file-2", "file-3"]
        assert [f.size_bytes for f in files] == [len(p.bytes) for p in request.files]
        assert len(fake_openai.upload_requests) == 3

    @pytest.mark.asyncio
    async def test_multipart_carries_file_and_purpose(self, fake_openai, make_request, scope):
        request = make_request("invoice.pdf")
        await FileUploader(fake_openai.client(), purpose="user_data").upload_all(request.files, scope)

        (sent,) = fake_openai.upload_requests
        assert sent.headers["content-type"].startswith("multipart/form-data")
        assert b'filename="invoice.pdf"' in sent.content
        assert b"content of invoice.pdf" in sent.content
        assert b'name="purpose"' in sent.content
        assert b"user_data" in sent.content

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, fake_openai, make_request, scope):
        fake_openai.upload_replies = [
            httpx.Response(200, json={"id": "file-ok"}),
            httpx.Response(413, text='{"error": {"message": "File too large"}}'),
        ]
        request = make_request("a.pdf", "b.pdf", "c.pdf", "d.pdf")

        with pytest.raises(UpstreamError) as exc_info:
            await FileUploader(fake_openai.client()).upload_all(request.files, scope)

        assert len(fake_openai.upload_requests) == 2
        assert exc_info.value.status_code == 413
        assert exc_info.value.message == '{"error": {"message": "File too large"}}'

    @pytest.mark.asyncio
    async def test_cancel_between_uploads(self, fake_openai, make_request, clock):
        event = asyncio.Event()
        scope = CancellationScope(event, clock=clock)

        def first_upload(request):
            # Completes, but the caller cancels while it is in flight
            event.set()
            return httpx.Response(200, json={"id": "file-1"})

        fake_openai.upload_replies = [first_upload]
        request = make_request("a.pdf", "b.pdf")

        with pytest.raises(RequestCancelledError):
            await FileUploader(fake_openai.client()).upload_all(request.files, scope)

        assert len(fake_openai.upload_requests) == 1


class TestUploadOne:
    """Tests for reading the provider file id."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        [
            httpx.Response(200, json={"object": "file"}),
            httpx.Response(200, json={"id": "   "}),
            httpx.Response(200, json={"id": None}),
            httpx.Response(200, text="not json"),
        ],
    )
    async def test_missing_id_is_protocol_error(self, fake_openai, make_request, scope, reply):
        fake_openai.upload_replies = [reply]
        request = make_request("a.pdf")

        with pytest.raises(ProtocolError) as exc_info:
            await FileUploader(fake_openai.client()).upload_one(request.files[0], scope)

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_reported_content_type_kept(self, fake_openai, make_request, scope):
        fake_openai.upload_replies = [
            httpx.Response(200, json={"id": "file-x", "mime_type": "application/pdf"})
        ]
        request = make_request("a.pdf")

        provenance = await FileUploader(fake_openai.client()).upload_one(request.files[0], scope)

        assert provenance.file_id == "file-x"
        assert provenance.content_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_transport_failure_is_upstream_error(self, fake_openai, make_request, scope):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake_openai.upload_replies = [refuse]
        request = make_request("a.pdf")

        with pytest.raises(UpstreamError) as exc_info:
            await FileUploader(fake_openai.client()).upload_one(request.files[0], scope)

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_connection_dropped_past_threshold_is_timeout(
        self, fake_openai, make_request, scope, clock
    ):
        def drop(request):
            clock.advance(95)
            raise httpx.RemoteProtocolError("Server disconnected without sending a response.")

        fake_openai.upload_replies = [drop]
        request = make_request("a.pdf")

        with pytest.raises(ProviderTimeoutError):
            await FileUploader(fake_openai.client()).upload_one(request.files[0], scope)
