"""Streaming download of source files.

:func:`open_stream` issues a streaming GET and hands back a
:class:`DownloadStream` as soon as the response headers arrive.  The body
is not read until a consumer iterates the stream, and only one consumer may
ever attach, so nothing is buffered or dropped before the upload (or the
base64 encoder) is wired up.

Filename inference, in order:

1. the last segment of the URL path, or ``downloaded_file`` when empty;
2. a ``Content-Disposition`` filename, when present, replaces it;
3. when the result has no extension, the ``Content-Type`` subtype is appended.
"""

from __future__ import annotations

import base64
import logging
import posixpath
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

import httpx

from ..exceptions import FileTransferError, StreamConsumedError
from ..infra.settings import settings
from ..models import InlinePayload

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "downloaded_file"
DEFAULT_MIME_TYPE = "application/octet-stream"

_DISPOSITION_RE = re.compile(r'filename\s*=\s*(?:"([^"]+)"|([^";\s]+))', re.IGNORECASE)


def file_name_from_url(url: str) -> str:
    name = posixpath.basename(unquote(urlparse(url).path))
    if not name or name == "/":
        return DEFAULT_FILE_NAME
    return name


def file_name_from_disposition(value: str | None) -> str | None:
    if not value:
        return None
    match = _DISPOSITION_RE.search(value)
    if not match:
        return None
    name = (match.group(1) or match.group(2) or "").strip()
    return name or None


def media_type(content_type: str | None) -> str | None:
    """``"text/csv; charset=utf-8"`` -> ``"text/csv"``."""
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip() or None


def infer_file_name(url: str, headers: httpx.Headers | dict[str, str]) -> str:
    headers = httpx.Headers(headers)
    name = file_name_from_disposition(headers.get("content-disposition")) or file_name_from_url(url)
    if not PurePosixPath(name).suffix:
        mime = media_type(headers.get("content-type"))
        if mime and "/" in mime:
            name = f"{name}.{mime.rsplit('/', 1)[-1]}"
    return name


class DownloadStream:
    """A downloaded body that has not been read yet.

    Iterate it (once) to receive the raw bytes.  A second attempt to attach a
    consumer raises :class:`StreamConsumedError`.
    """

    def __init__(self, response: httpx.Response, *, url: str) -> None:
        self._response = response
        self._consumed = False
        self.url = url
        self.file_name = infer_file_name(url, response.headers)
        self.mime_type = media_type(response.headers.get("content-type")) or DEFAULT_MIME_TYPE

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def consumed(self) -> bool:
        return self._consumed

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._consumed:
            raise StreamConsumedError(f"Download stream for {self.file_name} already has a consumer")
        self._consumed = True
        return self._iter_body()

    async def _iter_body(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as exc:
            raise FileTransferError(f"Failed to download and process the file: {exc}") from exc

    async def read(self) -> bytes:
        return b"".join([chunk async for chunk in self])


@asynccontextmanager
async def open_stream(url: str, *, client: httpx.AsyncClient | None = None) -> AsyncIterator[DownloadStream]:
    """Open *url* for streaming; the response is closed when the block exits.

    Transport failures and HTTP error statuses raise :class:`FileTransferError`.
    """
    if not url or not isinstance(url, str):
        raise FileTransferError("Failed to download and process the file: no file URL provided")

    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=settings.download_timeout_seconds, follow_redirects=True)
    try:
        try:
            response = await client.send(client.build_request("GET", url), stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FileTransferError(f"Failed to download and process the file: {exc}") from exc

        try:
            if response.is_error:
                raise FileTransferError(
                    f"Failed to download and process the file: HTTP {response.status_code} from {url}"
                )
            download = DownloadStream(response, url=url)
            logger.debug("Opened download %s as %s (%s)", url, download.file_name, download.mime_type)
            yield download
        finally:
            await response.aclose()
    finally:
        if owns_client:
            await client.aclose()


async def to_inline_payload(url: str, *, client: httpx.AsyncClient | None = None) -> InlinePayload:
    """Download *url* completely and return it base64-encoded with its mime type."""
    async with open_stream(url, client=client) as download:
        data = await download.read()
    logger.debug("Inlined %s: %d bytes as %s", download.file_name, len(data), download.mime_type)
    return InlinePayload(mime_type=download.mime_type, base64=base64.b64encode(data).decode("ascii"))
