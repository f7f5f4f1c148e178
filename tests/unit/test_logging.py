import json
import logging

import pytest

from phone_verification.infrastructure.sms.console_sms_gateway import ConsoleSmsGateway
from phone_verification.logging import (
    REDACTED,
    RedactCodeFilter,
    UTCJsonFormatter,
    mask_phone_number,
    setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_filter_redacts_code_by_default():
    record = _record(code="048213")
    assert RedactCodeFilter().filter(record) is True
    assert record.code == REDACTED


def test_filter_reveals_code_in_diagnostics_mode():
    record = _record(code="048213")
    RedactCodeFilter(reveal_codes=True).filter(record)
    assert record.code == "048213"


def test_filter_leaves_records_without_code_alone():
    record = _record(phone="+1555***4567")
    RedactCodeFilter().filter(record)
    assert not hasattr(record, "code")


def test_json_output_never_contains_code():
    record = _record(code="048213", phone="+1555***4567")
    RedactCodeFilter().filter(record)
    out = json.loads(UTCJsonFormatter("%(levelname)s %(message)s").format(record))
    assert out["code"] == REDACTED
    assert out["phone"] == "+1555***4567"
    assert "048213" not in json.dumps(out)


def test_mask_phone_number():
    assert mask_phone_number("+15551234567") == "+1555***4567"
    assert mask_phone_number("+1234") == "***"


def test_setup_logging_installs_single_redacting_handler():
    setup_logging("debug")
    root = logging.getLogger()
    try:
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler.formatter, UTCJsonFormatter)
        assert any(isinstance(f, RedactCodeFilter) for f in handler.filters)
    finally:
        setup_logging("INFO")


@pytest.mark.asyncio
async def test_console_gateway_hides_body_unless_revealed(caplog):
    caplog.set_level(logging.INFO)

    hidden = ConsoleSmsGateway()
    await hidden.send(to="+15551234567", body="Your code is 048213")
    shown = ConsoleSmsGateway(reveal_body=True)
    await shown.send(to="+15551234567", body="Your code is 048213")

    records = [r for r in caplog.records if r.getMessage() == "SMS-CONSOLE send"]
    assert [r.body for r in records] == [REDACTED, "Your code is 048213"]
    assert all(r.to == "+1555***4567" for r in records)
    assert hidden.sent == 1 and shown.sent == 1
