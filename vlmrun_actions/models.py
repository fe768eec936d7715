"""Data records exchanged with the remote inference service."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class FileHandle(BaseModel):
    """The remote service's reference to a registered file.

    Only ``id`` is guaranteed by the API; ``filename`` and ``content_type``
    fall back to what was inferred locally from the download.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    filename: str | None = None
    content_type: str | None = None

    @property
    def name(self) -> str | None:
        return self.filename

    @property
    def mime_type(self) -> str | None:
        return self.content_type


class InlinePayload(BaseModel):
    mime_type: str
    base64: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"


class JobRecord(BaseModel):
    """Transient view of a remote job while it is being polled."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    status: JobStatus | str | None = None
    response: Any = None

    @property
    def is_completed(self) -> bool:
        return self.status == JobStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status == JobStatus.FAILED


class JobRequest(BaseModel):
    """Body of one generate/embeddings call.

    Built fresh for every invocation and submitted at most once.  Exactly one
    of ``file_id``, ``image`` or ``url`` carries the input.
    """

    model: str
    domain: str | None = None
    mode: str | None = None
    file_id: str | None = None
    image: str | None = None
    url: str | None = None
    batch: bool = False
    callback_url: str | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ClassifiedError(BaseModel):
    kind: str
    message: str
    http_status: int | None = Field(default=None)


class ActionInputs(BaseModel):
    """Fields a host action passes to one invocation."""

    model_config = ConfigDict(extra="ignore")

    operation: str
    model: str = "vlm-1"
    mode: str | None = "accurate"
    file: str | None = None
    url: str | None = None
