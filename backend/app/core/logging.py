"""Logging setup for the AquaBill API."""

import logging

from backend.app.core.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str | None = None) -> None:
    """Attach one stream handler to the ``backend`` logger tree."""
    global _handler
    settings = get_settings()
    root = logging.getLogger("backend")
    root.setLevel(level or settings.log_level)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in root.handlers:
        root.addHandler(_handler)
