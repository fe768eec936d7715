"""Async HTTP client for the VLM Run API.

Every request goes through two ``httpx`` event hooks: one injects the
bearer credentials (recomputed per request), the other runs the response
classifier so 401/403/429/503/4xx answers surface as typed errors.
Source-file downloads use a separate client that never carries credentials.
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Any

import httpx

from .exceptions import APIError, TransportError
from .infra.callbacks import ClientCallbacks
from .infra.settings import AuthData, settings
from .models import FileHandle, JobRequest
from .responses import classify_response_hook

logger = logging.getLogger(__name__)


class Endpoint(str, enum.Enum):
    IMAGE = "/image/generate"
    DOCUMENT = "/document/generate"
    AUDIO = "/audio/generate"
    WEB = "/web/generate"
    DOCUMENT_EMBEDDINGS = "/experimental/document/embeddings"
    IMAGE_EMBEDDINGS = "/experimental/image/embeddings"

    def __str__(self) -> str:
        return self.value


class VLMRunClient:
    """Thin wrapper around ``httpx.AsyncClient`` bound to one set of credentials.

    Usage::

        async with VLMRunClient(AuthData(api_key="...")) as client:
            files = await client.list_files()
            handle = await client.upload_file("https://example.com/invoice.pdf")
            job = await client.generate(Endpoint.DOCUMENT, JobRequest(model="vlm-1", file_id=handle.id))
    """

    def __init__(
        self,
        auth: AuthData,
        *,
        timeout: float | None = None,
        download_timeout: float | None = None,
        callbacks: ClientCallbacks | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        download_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.auth = auth
        self.base_url = auth.resolved_base_url
        self.callbacks = callbacks or ClientCallbacks()
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.timeout_seconds,
            transport=transport,
            event_hooks={
                "request": [self._inject_credentials],
                "response": [classify_response_hook],
            },
        )
        self.download_client = httpx.AsyncClient(
            timeout=download_timeout or settings.download_timeout_seconds,
            follow_redirects=True,
            transport=download_transport or transport,
        )

    async def __aenter__(self) -> VLMRunClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()
        await self.download_client.aclose()

    async def _inject_credentials(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.auth.api_key}"
        request.headers["Accept"] = "application/json"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        content: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Issue one API call and return the decoded JSON body.

        Classified statuses raise :class:`~vlmrun_actions.exceptions.APIError`
        subclasses; transport failures and remaining error statuses raise
        :class:`~vlmrun_actions.exceptions.TransportError`.  Nothing is retried.
        """
        info = {"method": method, "url": f"{self.base_url}{path}"}
        self.callbacks.fire("on_request", dict(info))
        t0 = time.perf_counter()
        try:
            response = await self._http.request(
                method, path, json=json, params=params, content=content, headers=headers
            )
            # Redirects are not followed; a 3xx fails here like an unclassified 5xx.
            response.raise_for_status()
            data = response.json()
        except APIError as exc:
            self.callbacks.fire("on_error", {**info, "error": exc})
            raise
        except httpx.HTTPStatusError as exc:
            self.callbacks.fire("on_error", {**info, "error": exc})
            raise TransportError(
                f"API request failed: HTTP {exc.response.status_code} for {method} {path}"
            ) from exc
        except httpx.HTTPError as exc:
            self.callbacks.fire("on_error", {**info, "error": exc})
            raise TransportError(f"API request failed: {exc}") from exc
        except ValueError as exc:
            self.callbacks.fire("on_error", {**info, "error": exc})
            raise TransportError(f"API request failed: invalid JSON from {method} {path}") from exc

        elapsed_ms = (time.perf_counter() - t0) * 1000
        logger.debug("[api] %s %s status=%d elapsed=%.0fms", method, path, response.status_code, elapsed_ms)
        self.callbacks.fire("on_response", {**info, "status": response.status_code, "elapsed_ms": elapsed_ms})
        return data

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def verify_credentials(self) -> Any:
        return await self.request_json("GET", "/models")

    async def list_files(self, *, skip: int = 0, limit: int = 10) -> list[dict[str, Any]]:
        data = await self.request_json("GET", "/files", params={"skip": skip, "limit": limit})
        return data if isinstance(data, list) else []

    async def upload_file(self, url: str) -> FileHandle:
        from .media.upload import upload_file

        return await upload_file(self, url)

    async def generate(self, endpoint: Endpoint | str, request: JobRequest) -> Any:
        """Submit *request* once to *endpoint* and return the decoded payload."""
        path = str(endpoint)
        logger.info(
            "Submitting %s model=%s domain=%s batch=%s callback=%s",
            path,
            request.model,
            request.domain,
            request.batch,
            request.callback_url is not None,
        )
        return await self.request_json("POST", path, json=request.to_body())

    async def get_response(self, job_id: str) -> Any:
        return await self.request_json("GET", f"/response/{job_id}")
