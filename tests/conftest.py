from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from vlmrun_actions.infra.settings import AuthData

API_BASE = "https://api.test/v1"
API_KEY = "test-key"

GENERATE_PATHS = {
    "/image/generate",
    "/document/generate",
    "/audio/generate",
    "/web/generate",
    "/experimental/document/embeddings",
    "/experimental/image/embeddings",
}


class FakeVLMRun:
    """In-memory stand-in for the VLM Run API plus the hosts serving source files.

    Every request (API or download) is recorded in :attr:`requests`.
    ``routes`` lets a test override a single ``(method, path)`` pair.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.sources: dict[str, tuple[bytes, dict[str, str]]] = {}
        self.registry: list[dict[str, Any]] = []
        self.uploaded: dict[str, bytes] = {}
        self.submitted: list[dict[str, Any]] = []
        self.generate_status: str | None = "completed"
        self.job_statuses: list[str] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    # -- setup helpers --------------------------------------------------

    def add_source(self, url: str, content: bytes, headers: dict[str, str] | None = None) -> None:
        self.sources[url] = (content, headers or {})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -- inspection helpers ---------------------------------------------

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).startswith(API_BASE)]

    @property
    def download_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if not str(r.url).startswith(API_BASE)]

    def api_paths(self) -> list[str]:
        return [f"{r.method} {_api_path(r)}" for r in self.api_requests]

    # -- handler ----------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)

        if not url.startswith(API_BASE):
            if url not in self.sources:
                return httpx.Response(404, text="not found")
            content, headers = self.sources[url]
            return httpx.Response(200, content=content, headers=headers)

        path = _api_path(request)
        override = self.routes.get((request.method, path))
        if override is not None:
            return override(request)

        if request.method == "POST" and path == "/files":
            return self._register_file(request)
        if request.method == "GET" and path == "/files":
            skip = int(request.url.params.get("skip", 0))
            limit = int(request.url.params.get("limit", 10))
            return httpx.Response(200, json=self.registry[skip : skip + limit])
        if request.method == "POST" and path in GENERATE_PATHS:
            body = json.loads(request.content)
            self.submitted.append(body)
            job: dict[str, Any] = {"id": f"job-{len(self.submitted)}", "request": body}
            if self.generate_status is not None:
                job["status"] = self.generate_status
            if self.generate_status in (None, "completed"):
                job["response"] = {"path": path}
            return httpx.Response(200, json=job)
        if request.method == "GET" and path.startswith("/response/"):
            job_id = path.rsplit("/", 1)[-1]
            status = self.job_statuses.pop(0) if self.job_statuses else "completed"
            job = {"id": job_id, "status": status}
            if status == "completed":
                job["response"] = {"answer": 42}
            return httpx.Response(200, json=job)
        if request.method == "GET" and path == "/models":
            return httpx.Response(200, json=[{"model": "vlm-1", "domain": "document.invoice"}])
        return httpx.Response(404, json={"detail": "Not Found"})

    def _register_file(self, request: httpx.Request) -> httpx.Response:
        body = request.content
        name = re.search(rb'filename="([^"]*)"', body)
        boundary = request.headers["content-type"].split("boundary=", 1)[1]
        start = body.index(b"\r\n\r\n") + 4
        end = body.rindex(f"\r\n--{boundary}--".encode())
        file_id = f"file-{len(self.registry) + 1}"
        record = {
            "id": file_id,
            "filename": name.group(1).decode() if name else None,
            "bytes": end - start,
            "purpose": "assistants",
        }
        self.registry.append(record)
        self.uploaded[file_id] = body[start:end]
        return httpx.Response(200, json=record)


def _api_path(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/v1")


@pytest.fixture
def fake_api() -> FakeVLMRun:
    return FakeVLMRun()


@pytest.fixture
def auth() -> AuthData:
    return AuthData(api_key=API_KEY, base_url=API_BASE)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests that call the real VLM Run API")
