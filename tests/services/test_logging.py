"""Logger naming and handler ownership tests."""
from __future__ import annotations

import logging

from addressbook import config as app_config
from addressbook.utils.logging import LOG_FORMAT, get_logger


def test_module_loggers_nest_under_application_logger():
    assert get_logger("search_service").name == f"{app_config.APP_NAME}.search_service"
    assert get_logger(f"{app_config.APP_NAME}.db").name == f"{app_config.APP_NAME}.db"
    assert get_logger().name == app_config.APP_NAME


def test_only_application_logger_owns_a_handler():
    root = get_logger()
    child = get_logger("login")
    get_logger("login")

    stream_handlers = [h for h in root.handlers if isinstance(h, logging.StreamHandler)]
    assert len(stream_handlers) == 1
    assert stream_handlers[0].formatter._fmt == LOG_FORMAT
    assert child.handlers == []
    assert child.propagate is True
    assert root.propagate is False
