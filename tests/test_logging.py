import logging

from backend.app.core.logging import LOG_FORMAT, configure_logging


def test_configure_logging_installs_one_handler():
    root = logging.getLogger("backend")
    configure_logging()
    installed = [h for h in root.handlers if h.formatter and h.formatter._fmt == LOG_FORMAT]
    configure_logging()
    configure_logging("DEBUG")
    again = [h for h in root.handlers if h.formatter and h.formatter._fmt == LOG_FORMAT]
    assert len(installed) == 1
    assert again == installed
    assert root.level == logging.DEBUG
    configure_logging("INFO")
