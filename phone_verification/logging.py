import logging
import sys
import time

from pythonjsonlogger.json import JsonFormatter

REDACTED = "******"


class UTCJsonFormatter(JsonFormatter):
    converter = time.gmtime


class RedactCodeFilter(logging.Filter):
    """Masks the `code` extra field so verification secrets never reach the logs."""

    def __init__(self, reveal_codes: bool = False) -> None:
        super().__init__()
        self.reveal_codes = reveal_codes

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.reveal_codes and getattr(record, "code", None) is not None:
            record.code = REDACTED
        return True


def mask_phone_number(phone_number: str) -> str:
    """+15551234567 -> +1555***4567"""
    if len(phone_number) <= 8:
        return "***"
    return f"{phone_number[:5]}***{phone_number[-4:]}"


def setup_logging(level: str = "INFO", *, reveal_codes: bool = False) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    handler.setFormatter(UTCJsonFormatter(fmt))
    handler.addFilter(RedactCodeFilter(reveal_codes=reveal_codes))
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel("WARNING")
