from __future__ import annotations

import logging

from phone_verification.domain.ports.sms_gateway import SmsGatewayPort
from phone_verification.logging import REDACTED, mask_phone_number

logger = logging.getLogger(__name__)


class ConsoleSmsGateway(SmsGatewayPort):
    """
    Development stand-in: logs the SMS instead of sending it.
    The body carries the code, so it is only shown when reveal_body is set.
    """

    def __init__(self, *, reveal_body: bool = False) -> None:
        self._reveal_body = reveal_body
        self.sent: int = 0

    async def send(self, *, to: str, body: str) -> None:
        self.sent += 1
        logger.info(
            "SMS-CONSOLE send",
            extra={
                "to": mask_phone_number(to),
                "body": body if self._reveal_body else REDACTED,
            },
        )

    async def aclose(self) -> None:
        return None
