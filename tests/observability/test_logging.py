"""
Test suite for logging helpers and correlation ids.

System role: Verification of structured logging utilities
"""

import logging
import uuid

from docchat.observability.correlation import clear_correlation_id, get_correlation_id, set_correlation_id
from docchat.observability.log_utils import log_exception_with_context, safe_log_value
from docchat.observability.logger import CorrelationIdFilter


class TestSafeLogValue:
    def test_should_summarize_collections(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"
        assert safe_log_value(None) == "None"

    def test_should_truncate_long_strings(self) -> None:
        value = safe_log_value("x" * 20, max_length=5)

        assert value == "xxxxx... (truncated, 20 total)"

    def test_should_stringify_uuids(self) -> None:
        document_id = uuid.uuid4()

        assert safe_log_value(document_id) == str(document_id)


class TestCorrelationId:
    def test_set_should_generate_when_missing(self) -> None:
        value = set_correlation_id()

        assert get_correlation_id() == value
        assert uuid.UUID(value)
        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_filter_should_stamp_records(self) -> None:
        set_correlation_id("req-1")
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "req-1"
        clear_correlation_id()

    def test_filter_should_use_dash_outside_requests(self) -> None:
        clear_correlation_id()
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"


class TestLogExceptionWithContext:
    def test_should_attach_error_type_and_context(self, caplog) -> None:
        logger = logging.getLogger("docchat.test")

        with caplog.at_level(logging.WARNING, logger="docchat.test"):
            log_exception_with_context(
                logger,
                "Tier failed",
                ValueError("bad vector"),
                level=logging.WARNING,
                tier="hybrid",
            )

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.error_type == "ValueError"
        assert record.error_msg == "bad vector"
        assert record.tier == "hybrid"
        assert record.exc_info is not None
