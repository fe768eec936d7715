"""Resolving a submitted job to its final result.

Two interchangeable strategies implement :class:`CompletionResolver`:

``PollingCompletion``
    Submits in batch mode and polls ``GET /response/{id}`` until the job is
    ``completed``.  ``pending`` and ``processing`` are both non-terminal.
    Attempts are strictly sequential and bounded; a transport failure while
    polling propagates at once instead of consuming the attempt budget.

``CallbackCompletion``
    Attaches a callback address and submits in batch mode.  The remote
    service later calls that address with the final payload and the host
    hands it back through :meth:`CallbackCompletion.resume`.  No polling and
    no job state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from .exceptions import ConfigurationError, JobFailedError, JobTimeoutError
from .infra.settings import Settings, settings
from .models import JobRecord, JobRequest

if TYPE_CHECKING:
    from .client import VLMRunClient

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 30
RETRY_DELAY = 4.0  # seconds


class CompletionResolver(Protocol):
    def prepare(self, request: JobRequest) -> JobRequest:
        """Return the request as it must be submitted under this strategy."""
        ...

    async def resolve(self, client: VLMRunClient, submitted: Any) -> Any:
        """Turn the submission response into the invocation's result."""
        ...


def _record(payload: Any) -> JobRecord | None:
    if not isinstance(payload, Mapping):
        return None
    # Only id and status matter here; the rest of the payload is returned untouched.
    job_id = payload.get("id")
    status = payload.get("status")
    return JobRecord(
        id=None if job_id is None else str(job_id),
        status=status if isinstance(status, str) else None,
    )


@dataclass
class PollingCompletion:
    max_attempts: int = MAX_ATTEMPTS
    retry_delay: float = RETRY_DELAY
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.retry_delay < 0:
            raise ConfigurationError("retry_delay must not be negative")

    def prepare(self, request: JobRequest) -> JobRequest:
        return request.model_copy(update={"batch": True})

    async def resolve(self, client: VLMRunClient, submitted: Any) -> Any:
        record = _record(submitted)
        # Responses without a job status are already final results.
        if record is None or record.status is None or record.is_completed:
            return submitted
        if record.is_failed:
            raise JobFailedError(f"Job {record.id} failed", job=submitted)
        if not record.id:
            raise JobFailedError("Submission returned a pending job without an id", job=submitted)
        return await self.poll(client, record.id)

    async def poll(self, client: VLMRunClient, job_id: str) -> Any:
        for attempt in range(1, self.max_attempts + 1):
            logger.debug("Getting job %s response, attempt %d/%d", job_id, attempt, self.max_attempts)
            payload = await client.get_response(job_id)
            record = _record(payload)
            if record is not None and record.is_completed:
                logger.info("Job %s completed after %d attempt(s)", job_id, attempt)
                return payload
            if record is not None and record.is_failed:
                raise JobFailedError(f"Job {job_id} failed", job=payload)
            if attempt < self.max_attempts:
                await self.sleep(self.retry_delay)

        logger.warning("Job %s not completed after %d attempts", job_id, self.max_attempts)
        raise JobTimeoutError("Document processing timed out", job_id=job_id, attempts=self.max_attempts)


@dataclass
class CallbackCompletion:
    callback_url_factory: Callable[[], str]

    def prepare(self, request: JobRequest) -> JobRequest:
        callback_url = self.callback_url_factory()
        if not callback_url:
            raise ConfigurationError("callback_url_factory returned an empty address")
        return request.model_copy(update={"batch": True, "callback_url": callback_url})

    async def resolve(self, client: VLMRunClient, submitted: Any) -> Any:
        return submitted

    @staticmethod
    def resume(payload: Mapping[str, Any]) -> dict[str, Any]:
        """Return the final payload delivered to the callback address."""
        return dict(payload)


def build_completion_resolver(
    source: Settings | str | None = None,
    *,
    callback_url_factory: Callable[[], str] | None = None,
    sleep: Callable[[float], Awaitable[Any]] | None = None,
) -> CompletionResolver:
    """Pick the strategy named by *source* (a strategy name or ``Settings``)."""
    config = settings if source is None or isinstance(source, str) else source
    strategy = source if isinstance(source, str) else config.completion_strategy

    if strategy == "poll":
        return PollingCompletion(
            max_attempts=config.max_attempts,
            retry_delay=config.retry_delay_seconds,
            sleep=sleep or asyncio.sleep,
        )
    if strategy == "callback":
        if callback_url_factory is None:
            raise ConfigurationError("The callback completion strategy needs a callback_url_factory")
        return CallbackCompletion(callback_url_factory)
    raise ConfigurationError(f"Unknown completion strategy: {strategy!r}")
