import json
import logging
import sys

import pytest

from school_cms.app.core.logging import MAX_STACK_CHARS, JsonFormatter, setup_logging
from school_cms.app.settings import AppSettings


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg="hello", exc_info=None, **extra):
    record = logging.LogRecord("school_cms.test", logging.WARNING, __file__, 1, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self):
        payload = json.loads(JsonFormatter().format(_record()))

        assert payload["level"] == "WARNING"
        assert payload["logger"] == "school_cms.test"
        assert payload["message"] == "hello"
        assert "http" not in payload

    def test_http_and_storage_context(self):
        record = _record(http_method="PUT", path="/api/news/1", status_code=502, storage_key="news/a.png")

        payload = json.loads(JsonFormatter().format(record))
        assert payload["http"] == {"method": "PUT", "path": "/api/news/1", "status": 502}
        assert payload["storage_key"] == "news/a.png"

    def test_exception_is_truncated(self):
        try:
            raise RuntimeError("x" * (MAX_STACK_CHARS * 2))
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())

        error = json.loads(JsonFormatter().format(record))["error"]
        assert error["type"] == "RuntimeError"
        assert error["stack"].endswith("...(truncated)")


class TestSetupLogging:
    def test_prod_uses_json(self, restore_logging):
        setup_logging(AppSettings(env="prod"))

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_local_is_verbose_and_plain(self, restore_logging):
        setup_logging(AppSettings(env="local"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_explicit_overrides(self, restore_logging):
        setup_logging(AppSettings(env="local", log_level="warning", log_format="json"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
