"""Tests for logging setup and small utilities."""

import json
import logging

import pytest
from rich.logging import RichHandler

from ledgerplan.utils import StructuredFormatter, format_duration, generate_ulid, setup_logging


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logging.getLogger("ledgerplan").handlers = []


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_pretty_uses_rich(self):
        logger = setup_logging("DEBUG", "pretty")
        assert logger.name == "ledgerplan"
        assert logger.level == logging.DEBUG
        assert [type(h) for h in logger.handlers] == [RichHandler]

    def test_structured_console(self):
        logger = setup_logging("INFO", "structured")
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logging("INFO", "structured", log_file=log_file, console_output=False)
        logging.getLogger("ledgerplan.executor").info("hello", extra={"run_id": "R1", "component": "A"})
        for handler in logger.handlers:
            handler.flush()
        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["message"] == "hello"
        assert record["run_id"] == "R1"
        assert record["component"] == "A"
        assert record["logger"] == "ledgerplan.executor"

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1


class TestStructuredFormatter:
    def test_exception_included(self):
        formatter = StructuredFormatter()
        try:
            raise ValueError("bad")
        except ValueError:
            import sys
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())
        data = json.loads(formatter.format(record))
        assert data["level"] == "ERROR"
        assert "ValueError: bad" in data["exception"]


class TestUlid:
    def test_length_and_alphabet(self):
        ulid = generate_ulid()
        assert len(ulid) == 26
        assert set(ulid) <= set("0123456789ABCDEFGHJKMNPQRSTVWXYZ")

    def test_unique(self):
        assert generate_ulid() != generate_ulid()


class TestFormatDuration:
    @pytest.mark.parametrize("seconds,expected", [
        (5, "5s"),
        (83, "1m 23s"),
        (3725, "1h 2m 5s"),
    ])
    def test_format(self, seconds, expected):
        assert format_duration(seconds) == expected
