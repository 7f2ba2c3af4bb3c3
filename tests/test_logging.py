import json
import logging

from roomfinder.exceptions import InvalidCriteriaError, ListingNotFoundError, RoomFinderError
from roomfinder.logging import JsonFormatter, get_logger, setup_logging


def test_setup_logging_sets_levels():
    setup_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("roomfinder").level == logging.DEBUG
    setup_logging("not-a-level")
    assert logging.getLogger().level == logging.INFO


def test_json_formatter():
    record = logging.LogRecord("roomfinder.search", logging.INFO, __file__, 1, "matched %d", (3,), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "roomfinder.search"
    assert data["message"] == "matched 3"


def test_get_logger():
    assert get_logger("roomfinder.app").name == "roomfinder.app"


def test_exception_hierarchy():
    assert issubclass(InvalidCriteriaError, RoomFinderError)
    assert issubclass(ListingNotFoundError, RoomFinderError)
