"""vlmrun-actions exception hierarchy.

Every error raised by the package inherits from :class:`VLMRunError`.
Errors that come back from the remote API are :class:`APIError` subclasses
and carry the classification produced by
:func:`vlmrun_actions.responses.classify_response`.  Local failures
(transport, malformed input, invalid operation, stream misuse) are
:class:`GenericError` subclasses.  Where it helps callers, exceptions also
inherit from the matching stdlib exception (e.g. ``JobTimeoutError``
extends ``TimeoutError``).
"""

from __future__ import annotations

from typing import Any


class VLMRunError(Exception):
    """Base exception for all vlmrun-actions errors."""

    kind: str = "Generic"
    http_status: int | None = None


class ConfigurationError(VLMRunError, ValueError):
    """Raised for invalid configuration (missing keys, bad settings)."""


class GenericError(VLMRunError):
    """Raised for local failures that carry no remote classification."""

    kind = "Generic"


class InvalidOperationError(GenericError, ValueError):
    """Raised when an operation does not belong to any known family."""

    def __init__(self, operation: Any) -> None:
        self.operation = operation
        super().__init__(f"Invalid operation: {operation}")


class TransportError(GenericError):
    """Raised when a request to the remote API cannot be completed."""


class FileTransferError(GenericError):
    """Raised when a source file cannot be downloaded or registered."""


class StreamConsumedError(GenericError, RuntimeError):
    """Raised when a second consumer tries to read a download stream."""


class JobFailedError(GenericError, RuntimeError):
    """Raised when the remote service reports a job as failed."""

    def __init__(self, message: str = "", *, job: Any = None) -> None:
        self.job = job
        super().__init__(message)


class JobTimeoutError(VLMRunError, TimeoutError):
    """Raised when the poll budget is exhausted before a job completes."""

    kind = "TimeoutError"

    def __init__(self, message: str = "", *, job_id: str | None = None, attempts: int = 0) -> None:
        self.job_id = job_id
        self.attempts = attempts
        super().__init__(message)


class APIError(VLMRunError):
    """Raised when the remote API answers with a classified error status."""

    kind = "UnexpectedError"

    def __init__(self, message: str = "", *, http_status: int | None = None, classified: Any = None) -> None:
        self.http_status = http_status
        self.classified = classified
        super().__init__(message)


class AuthenticationError(APIError):
    """Bad or missing credentials (HTTP 401/403)."""

    kind = "AuthenticationError"


class SystemBusyError(APIError):
    """Remote service overloaded (HTTP 429/503)."""

    kind = "SystemBusyError"


class UnexpectedError(APIError):
    """Any other client error (HTTP 4xx)."""

    kind = "UnexpectedError"


class OperationError(VLMRunError):
    """Wraps any failure that crosses the dispatcher boundary.

    The wrapped exception is available as ``__cause__``; its classification
    is copied onto :attr:`kind` and :attr:`http_status`.
    """

    def __init__(self, message: str = "", *, cause: BaseException | None = None) -> None:
        self.kind = getattr(cause, "kind", "Generic") if cause is not None else "Generic"
        self.http_status = getattr(cause, "http_status", None) if cause is not None else None
        super().__init__(message)
