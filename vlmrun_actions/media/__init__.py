"""File transfer: streamed downloads, inline payloads and registry uploads."""

from .download import (
    DEFAULT_FILE_NAME,
    DEFAULT_MIME_TYPE,
    DownloadStream,
    infer_file_name,
    open_stream,
    to_inline_payload,
)
from .upload import MultipartFileStream, upload_file

__all__ = [
    "DEFAULT_FILE_NAME",
    "DEFAULT_MIME_TYPE",
    "DownloadStream",
    "MultipartFileStream",
    "infer_file_name",
    "open_stream",
    "to_inline_payload",
    "upload_file",
]
