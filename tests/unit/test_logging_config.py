"""
Tests for harness logging setup and the JSON formatter.
"""
import json
import logging

from teammates_e2e.logging_config import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord("teammates_e2e.backdoor", logging.ERROR, __file__, 10, "GET %s failed", ("/x",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_one_object_per_record(self):
        payload = json.loads(JSONFormatter().format(_record()))

        assert payload["level"] == "ERROR"
        assert payload["logger"] == "teammates_e2e.backdoor"
        assert payload["message"] == "GET /x failed"
        assert "test_class" not in payload

    def test_test_class_extra_included(self):
        payload = json.loads(JSONFormatter().format(_record(test_class="TestInstructorHome")))

        assert payload["test_class"] == "TestInstructorHome"


class TestSetupLogging:
    """Each harness record is emitted exactly once."""

    def test_stream_replaces_handlers_and_stops_propagation(self, harness_logger):
        setup_logging("INFO")
        handler = setup_logging("WARNING", json_output=True)

        assert harness_logger.handlers == [handler]
        assert isinstance(handler.formatter, JSONFormatter)
        assert not harness_logger.propagate
        assert harness_logger.level == logging.WARNING

    def test_without_stream_records_only_propagate(self, harness_logger, caplog, capsys):
        assert setup_logging("INFO", stream=False) is None

        logging.getLogger("teammates_e2e.backdoor").info("restored bundle")

        assert [r.getMessage() for r in caplog.records] == ["restored bundle"]
        assert "restored bundle" not in capsys.readouterr().err
