import json
from io import StringIO
import logging

import pytest

from versioned_api.log_utils import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_setup_logging_emits_json():
    stream = StringIO()
    setup_logging(stream=stream)
    logger = logging.getLogger("test")
    logger.error("failure")
    data = json.loads(stream.getvalue())
    assert data["message"] == "failure"
    assert data["level"] == "ERROR"
    assert "api_version" not in data


def test_json_records_carry_request_version(app):
    stream = StringIO()
    setup_logging(stream=stream)

    with app.test_request_context("/api/current/humans"):
        app.preprocess_request()
        logging.getLogger("test").warning("inside request")

    data = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert data["api_version"] == "v2"
    assert data["raw_api_version"] == "current"
    assert data["path"] == "/api/current/humans"


def test_plain_format():
    stream = StringIO()
    setup_logging(stream=stream, use_json=False)
    logging.getLogger("test").info("hello")
    assert "[INFO] test: hello" in stream.getvalue()
