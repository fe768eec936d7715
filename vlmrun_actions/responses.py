"""Classification of remote API responses into the error taxonomy.

Checked in order, first match wins:

* 401, 403 -> ``AuthenticationError`` (message from the body's ``detail``)
* 429, 503 -> ``SystemBusyError``
* any other 4xx -> ``UnexpectedError``
* everything else passes through untouched (2xx, 3xx, 5xx other than 503)

No retry happens here; the classified error becomes the invocation's failure.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from .exceptions import APIError, AuthenticationError, SystemBusyError, UnexpectedError
from .models import ClassifiedError

logger = logging.getLogger(__name__)

AUTH_STATUSES = frozenset({401, 403})
BUSY_STATUSES = frozenset({429, 503})

SYSTEM_BUSY_MESSAGE = "System is busy, please try again later."
UNEXPECTED_MESSAGE = "Unexpected error, please contact support."

_ERROR_TYPES: dict[str, type[APIError]] = {
    "AuthenticationError": AuthenticationError,
    "SystemBusyError": SystemBusyError,
    "UnexpectedError": UnexpectedError,
}


def _detail(body: Any) -> str:
    if isinstance(body, dict):
        detail = body.get("detail")
        if detail is not None:
            return detail if isinstance(detail, str) else json.dumps(detail)
    if isinstance(body, str) and body:
        return body
    return "Authentication failed"


def classify_response(status: int, body: Any = None) -> ClassifiedError | None:
    """Map *status* (and *body*) to a :class:`ClassifiedError`, or ``None`` to pass through."""
    if status in AUTH_STATUSES:
        return ClassifiedError(kind="AuthenticationError", message=_detail(body), http_status=status)
    if status in BUSY_STATUSES:
        return ClassifiedError(kind="SystemBusyError", message=SYSTEM_BUSY_MESSAGE, http_status=status)
    if 400 <= status < 500:
        return ClassifiedError(kind="UnexpectedError", message=UNEXPECTED_MESSAGE, http_status=status)
    return None


def to_exception(classified: ClassifiedError) -> APIError:
    error_cls = _ERROR_TYPES.get(classified.kind, APIError)
    return error_cls(classified.message, http_status=classified.http_status, classified=classified)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (ValueError, httpx.ResponseNotRead):
        try:
            return response.text
        except httpx.ResponseNotRead:
            return None


def raise_for_classified(response: httpx.Response) -> httpx.Response:
    """Raise the classified error for *response*, or return it unchanged."""
    classified = classify_response(response.status_code, _response_body(response))
    if classified is None:
        return response
    try:
        target = f"{response.request.method} {response.request.url}"
    except RuntimeError:
        target = "<detached response>"
    logger.warning("API call %s classified as %s (HTTP %d)", target, classified.kind, response.status_code)
    raise to_exception(classified)


async def classify_response_hook(response: httpx.Response) -> None:
    """``httpx`` response event hook running the classifier after every call."""
    if 400 <= response.status_code < 500:
        await response.aread()
    raise_for_classified(response)
