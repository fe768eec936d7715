"""Streamed re-upload of a downloaded file to the remote file registry."""

from __future__ import annotations

import logging
import secrets
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ..exceptions import FileTransferError, TransportError
from ..models import FileHandle
from .download import DownloadStream, open_stream

if TYPE_CHECKING:
    from ..client import VLMRunClient

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', "%22").replace("\r", "").replace("\n", "")


class MultipartFileStream:
    """``multipart/form-data`` body with a single file part fed by a download.

    The download is only iterated when the HTTP client starts sending the
    body, so no bytes are read before the upload request is on the wire.
    """

    def __init__(self, download: DownloadStream, *, field_name: str = "file", boundary: str | None = None) -> None:
        self.download = download
        self.field_name = field_name
        self.boundary = boundary or secrets.token_hex(16)

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def _part_header(self) -> bytes:
        return (
            f"--{self.boundary}\r\n"
            f'Content-Disposition: form-data; name="{_quote(self.field_name)}"; '
            f'filename="{_quote(self.download.file_name)}"\r\n'
            f"Content-Type: {self.download.mime_type}\r\n"
            "\r\n"
        ).encode()

    async def __aiter__(self) -> AsyncIterator[bytes]:
        yield self._part_header()
        async for chunk in self.download:
            yield chunk
        yield f"\r\n--{self.boundary}--\r\n".encode()


async def upload_file(client: VLMRunClient, url: str) -> FileHandle:
    """Stream *url* into ``POST /files`` and return the registered handle."""
    async with open_stream(url, client=client.download_client) as download:
        body = MultipartFileStream(download)
        try:
            data = await client.request_json(
                "POST",
                "/files",
                content=body,
                headers={"Content-Type": body.content_type},
            )
        except TransportError as exc:
            raise FileTransferError(f"Failed to register {download.file_name}: {exc}") from exc

    if not isinstance(data, dict):
        raise FileTransferError(f"Unexpected file registration response: {data!r}")
    try:
        handle = FileHandle.model_validate(
            {"filename": download.file_name, "content_type": download.mime_type, **data}
        )
    except ValidationError as exc:
        raise FileTransferError(f"File registration returned no usable id: {data!r}") from exc

    logger.info("Uploaded %s as file %s", download.file_name, handle.id)
    return handle
