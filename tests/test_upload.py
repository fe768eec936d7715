"""Tests for the streamed multipart upload path."""

from __future__ import annotations

import httpx
import pytest

from vlmrun_actions.client import Endpoint, VLMRunClient
from vlmrun_actions.exceptions import AuthenticationError, FileTransferError
from vlmrun_actions.models import FileHandle, JobRequest


API_KEY = "test-key"
PDF_URL = "https://files.test/docs/report.pdf"
PDF_BYTES = b"%PDF-1.7\n" + b"0123456789" * 1000


@pytest.fixture
def client(auth, fake_api):
    return VLMRunClient(auth, transport=fake_api.transport())


class TestUploadFile:
    @pytest.mark.asyncio
    async def test_returns_registered_handle(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})
        async with client:
            handle = await client.upload_file(PDF_URL)

        assert isinstance(handle, FileHandle)
        assert handle.id == "file-1"
        assert handle.name == "report.pdf"
        assert handle.mime_type == "application/pdf"
        assert fake_api.uploaded["file-1"] == PDF_BYTES

    @pytest.mark.asyncio
    async def test_multipart_request_shape(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})
        async with client:
            await client.upload_file(PDF_URL)

        (upload,) = [r for r in fake_api.api_requests if r.method == "POST"]
        assert upload.headers["authorization"] == f"Bearer {API_KEY}"
        assert upload.headers["accept"] == "application/json"
        assert upload.headers["content-type"].startswith("multipart/form-data; boundary=")
        assert b'name="file"; filename="report.pdf"' in upload.content
        assert b"Content-Type: application/pdf" in upload.content

    @pytest.mark.asyncio
    async def test_download_happens_before_upload(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})
        async with client:
            await client.upload_file(PDF_URL)
        assert [str(r.url) for r in fake_api.requests][0] == PDF_URL
        assert fake_api.api_paths() == ["POST /files"]

    @pytest.mark.asyncio
    async def test_uploaded_id_usable_as_file_id(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})
        async with client:
            handle = await client.upload_file(PDF_URL)
            files = await client.list_files()
            listed = {f["id"]: f for f in files}
            assert handle.id in listed
            assert listed[handle.id]["bytes"] == len(PDF_BYTES)

            await client.generate(Endpoint.DOCUMENT, JobRequest(model="vlm-1", file_id=handle.id))

        assert fake_api.submitted[-1]["file_id"] == handle.id

    @pytest.mark.asyncio
    async def test_missing_source_fails_without_api_call(self, client, fake_api):
        async with client:
            with pytest.raises(FileTransferError, match="HTTP 404"):
                await client.upload_file("https://files.test/nope.pdf")
        assert fake_api.api_requests == []

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})

        def refuse(request):
            raise httpx.ConnectError("registry unreachable", request=request)

        fake_api.routes[("POST", "/files")] = refuse
        async with client:
            with pytest.raises(FileTransferError, match="registry unreachable"):
                await client.upload_file(PDF_URL)

    @pytest.mark.asyncio
    async def test_classified_error_not_rewrapped(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})
        fake_api.routes[("POST", "/files")] = lambda request: httpx.Response(401, json={"detail": "Invalid key"})
        async with client:
            with pytest.raises(AuthenticationError, match="Invalid key"):
                await client.upload_file(PDF_URL)

    @pytest.mark.asyncio
    async def test_response_without_id(self, client, fake_api):
        fake_api.add_source(PDF_URL, PDF_BYTES, {"Content-Type": "application/pdf"})
        fake_api.routes[("POST", "/files")] = lambda request: httpx.Response(200, json={"filename": "report.pdf"})
        async with client:
            with pytest.raises(FileTransferError, match="no usable id"):
                await client.upload_file(PDF_URL)
