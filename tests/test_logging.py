"""Validate correlation ID handling in structured logs."""

from preserveorder.core import logging as po_logging


def test_set_correlation_id_generates_short_id():
    correlation_id = po_logging.set_correlation_id()

    assert len(correlation_id) == 8
    assert po_logging.get_correlation_id() == correlation_id


def test_add_correlation_id_processor():
    po_logging.set_correlation_id("run-42")

    event = po_logging.add_correlation_id(None, "info", {"event": "Headers merged"})

    assert event == {"event": "Headers merged", "correlation_id": "run-42"}


def test_setup_logging_json_output(capsys):
    po_logging.setup_logging(debug=False, rich_output=False)
    po_logging.set_correlation_id("json-run")

    po_logging.get_logger("tests").info("Merge completed", label_count=3)

    err = capsys.readouterr().err
    assert '"label_count": 3' in err
    assert '"correlation_id": "json-run"' in err
