from __future__ import annotations

from typing import Protocol


class SmsGatewayPort(Protocol):
    async def send(self, *, to: str, body: str) -> None:
        """Deliver an SMS. Raise SmsDeliveryError on any failure."""

    async def aclose(self) -> None:
        """Release transport resources the gateway owns."""
