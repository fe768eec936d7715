"""Observer hooks fired around every remote API call."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Callback = Callable[[dict[str, Any]], None]


@dataclass
class ClientCallbacks:
    """Optional ``on_request`` / ``on_response`` / ``on_error`` observers.

    Each receives a dict payload with at least ``method`` and ``url``.
    """

    on_request: Callback | None = None
    on_response: Callback | None = None
    on_error: Callback | None = None

    def fire(self, event: str, payload: dict[str, Any]) -> None:
        """Invoke one callback, logging and swallowing anything it raises."""
        cb = getattr(self, event, None)
        if cb is None:
            return
        try:
            cb(payload)
        except Exception:
            logger.exception("Callback %s raised an exception", event)
