"""Entry points an automation host calls for each action.

A host action (a :class:`~vlmrun_actions.operations.Resource`) offers a few
operations.  :func:`perform` checks the requested operation belongs to the
action, runs it through the :class:`~vlmrun_actions.dispatcher.Dispatcher`
and returns the result.  With the callback completion strategy the final
payload arrives later and is returned by :func:`perform_resume`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from .client import VLMRunClient
from .completion import CallbackCompletion, CompletionResolver, build_completion_resolver
from .dispatcher import Dispatcher
from .exceptions import InvalidOperationError, OperationError, VLMRunError
from .infra.callbacks import ClientCallbacks
from .infra.settings import AuthData, Settings, settings
from .models import ActionInputs
from .operations import RESOURCE_OPERATIONS, Operation, Resource

logger = logging.getLogger(__name__)


def _auth(auth: AuthData | Mapping[str, Any]) -> AuthData:
    if isinstance(auth, AuthData):
        return auth
    data = dict(auth)
    # Hosts hand credentials over with camelCase keys.
    return AuthData(api_key=data.get("api_key", data.get("apiKey")), base_url=data.get("base_url", data.get("baseUrl")))


async def run_operation(
    operation: Operation | str,
    inputs: ActionInputs | Mapping[str, Any],
    *,
    auth: AuthData | Mapping[str, Any] | None = None,
    completion: CompletionResolver | None = None,
    callback_url_factory: Callable[[], str] | None = None,
    config: Settings | None = None,
    callbacks: ClientCallbacks | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Open a client, dispatch one operation and close the client again."""
    config = config or settings
    credentials = _auth(auth) if auth is not None else AuthData.from_settings(config)
    if completion is None:
        completion = build_completion_resolver(config, callback_url_factory=callback_url_factory)

    async with VLMRunClient(
        credentials,
        timeout=config.timeout_seconds,
        download_timeout=config.download_timeout_seconds,
        callbacks=callbacks,
        transport=transport,
    ) as client:
        return await Dispatcher(client, completion).dispatch(operation, inputs)


async def perform(
    resource: Resource | str,
    auth: AuthData | Mapping[str, Any],
    inputs: ActionInputs | Mapping[str, Any],
    **kwargs: Any,
) -> Any:
    """Run the operation selected in *inputs* on behalf of host action *resource*."""
    try:
        action = Resource(resource)
        credentials = _auth(auth)
        data = inputs if isinstance(inputs, ActionInputs) else ActionInputs.model_validate(dict(inputs))
        operation = Operation.parse(data.operation)
        if operation not in RESOURCE_OPERATIONS[action]:
            raise InvalidOperationError(operation)
        return await run_operation(operation, data, auth=credentials, **kwargs)
    except OperationError as exc:
        logger.error("[PERFORM] - %s", exc)
        raise
    except (VLMRunError, ValueError) as exc:
        error = OperationError(f"File upload failed: {exc}", cause=exc)
        logger.error("[PERFORM] - %s", error)
        raise error from exc


def perform_resume(cleaned_request: Mapping[str, Any]) -> dict[str, Any]:
    """Return the payload the remote service delivered to the callback address."""
    logger.info("[RESUME] - received callback payload with keys %s", sorted(cleaned_request))
    return CallbackCompletion.resume(cleaned_request)


async def check_credentials(
    auth: AuthData | Mapping[str, Any],
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Check the credentials against ``GET /models``."""
    async with VLMRunClient(_auth(auth), transport=transport) as client:
        return await client.verify_credentials()
