"""日志通道与格式化测试。"""

import json
import logging

import pytest

from app.packages.cms.core.config import Settings
from app.packages.cms.core.logger import JsonFormatter, RequestIdFilter, get_logger, set_request_id


def test_channel_loggers_hang_under_app():
    assert get_logger().name == "app"
    assert get_logger("store").name == "app.store"
    assert get_logger("media").parent is get_logger()

    with pytest.raises(ValueError):
        get_logger("billing")


def test_json_formatter_reports_channel_and_request_id():
    record = logging.LogRecord("app.media", logging.INFO, __file__, 1, "moved %s", ("a.txt",), None)
    set_request_id("req-1")
    try:
        RequestIdFilter().filter(record)
    finally:
        set_request_id(None)

    payload = json.loads(JsonFormatter().format(record))
    assert payload["channel"] == "media"
    assert payload["request_id"] == "req-1"
    assert payload["msg"] == "moved a.txt"


def test_request_id_defaults_outside_requests():
    record = logging.LogRecord("app.store", logging.INFO, __file__, 1, "x", (), None)
    RequestIdFilter().filter(record)
    assert record.request_id == "-"


def test_channel_levels_parsing():
    settings = Settings(LOG_CHANNEL_LEVELS="store=debug, media = WARNING,broken")
    assert settings.log_channel_levels == {"store": "DEBUG", "media": "WARNING"}
