"""Routes one invocation to the right modality path.

Every operation belongs to exactly one family.  File-bearing families run
strictly in sequence: download, (upload,) submit, resolve.  File listing and
upload talk to the file registry directly and skip job submission.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .client import Endpoint, VLMRunClient
from .completion import CompletionResolver, PollingCompletion
from .exceptions import GenericError, OperationError, VLMRunError
from .media.download import to_inline_payload
from .models import ActionInputs, JobRequest
from .operations import Family, Operation, family_of, resolve_domain

logger = logging.getLogger(__name__)

NO_FILE_FOUND = "No file found"
FILE_LIST_SKIP = 0
FILE_LIST_LIMIT = 10


class Dispatcher:
    def __init__(self, client: VLMRunClient, completion: CompletionResolver | None = None) -> None:
        self.client = client
        self.completion = completion or PollingCompletion()

    async def dispatch(self, operation: Operation | str, inputs: ActionInputs | Mapping[str, Any]) -> Any:
        """Run *operation* with *inputs* and return its result.

        Any failure is re-raised as :class:`OperationError` with the original
        exception chained.  An unknown operation fails before any network call.
        """
        try:
            op = Operation.parse(operation)
            if not isinstance(inputs, ActionInputs):
                inputs = ActionInputs.model_validate({**dict(inputs), "operation": op.value})
            logger.info("Dispatching %s (model=%s)", op, inputs.model)

            match family_of(op):
                case Family.IMAGE:
                    return await self._image(op, inputs)
                case Family.DOCUMENT:
                    return await self._uploaded_file(op, inputs, Endpoint.DOCUMENT)
                case Family.AUDIO:
                    return await self._uploaded_file(op, inputs, Endpoint.AUDIO)
                case Family.AGENT:
                    return await self._agent(op, inputs)
                case Family.EMBEDDING:
                    return await self._embedding(op, inputs)
                case Family.FILE:
                    return await self._file(op, inputs)
                case unrouted:
                    raise AssertionError(f"family {unrouted!r} has no dispatch path")
        except (VLMRunError, ValidationError) as exc:
            raise OperationError(f"File upload failed: {exc}", cause=exc) from exc

    async def _submit(self, endpoint: Endpoint, request: JobRequest) -> Any:
        request = self.completion.prepare(request)
        submitted = await self.client.generate(endpoint, request)
        return await self.completion.resolve(self.client, submitted)

    def _require(self, value: str | None, field: str, op: Operation) -> str:
        if not value:
            raise GenericError(f"Operation {op} requires a '{field}' input")
        return value

    async def _image(self, op: Operation, inputs: ActionInputs) -> Any:
        payload = await to_inline_payload(self._require(inputs.file, "file", op), client=self.client.download_client)
        request = JobRequest(model=inputs.model, domain=_domain(op), image=payload.data_uri)
        return await self._submit(Endpoint.IMAGE, request)

    async def _uploaded_file(self, op: Operation, inputs: ActionInputs, endpoint: Endpoint) -> Any:
        handle = await self.client.upload_file(self._require(inputs.file, "file", op))
        request = JobRequest(model=inputs.model, domain=_domain(op), file_id=handle.id)
        return await self._submit(endpoint, request)

    async def _agent(self, op: Operation, inputs: ActionInputs) -> Any:
        request = JobRequest(
            model=inputs.model,
            domain=_domain(op),
            mode=inputs.mode,
            url=self._require(inputs.url, "url", op),
        )
        return await self._submit(Endpoint.WEB, request)

    async def _embedding(self, op: Operation, inputs: ActionInputs) -> Any:
        source = self._require(inputs.file, "file", op)
        if op is Operation.DOCUMENT_EMBEDDING:
            handle = await self.client.upload_file(source)
            return await self._submit(Endpoint.DOCUMENT_EMBEDDINGS, JobRequest(model=inputs.model, file_id=handle.id))
        payload = await to_inline_payload(source, client=self.client.download_client)
        return await self._submit(Endpoint.IMAGE_EMBEDDINGS, JobRequest(model=inputs.model, image=payload.data_uri))

    async def _file(self, op: Operation, inputs: ActionInputs) -> Any:
        if op is Operation.FILE_UPLOAD:
            handle = await self.client.upload_file(self._require(inputs.file, "file", op))
            return handle.model_dump(exclude_none=True)

        files = await self.client.list_files(skip=FILE_LIST_SKIP, limit=FILE_LIST_LIMIT)
        return {"fileList": files} if files else {"fileList": NO_FILE_FOUND}


def _domain(op: Operation) -> str | None:
    domain = resolve_domain(op)
    return domain.value if domain is not None else None
