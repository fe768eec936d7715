"""Infrastructure: settings, logging, callbacks."""

from .callbacks import ClientCallbacks
from .logging import JSONFormatter, configure_logging
from .settings import DEFAULT_BASE_URL, AuthData, Settings, settings

__all__ = [
    "DEFAULT_BASE_URL",
    "AuthData",
    "ClientCallbacks",
    "JSONFormatter",
    "Settings",
    "configure_logging",
    "settings",
]
