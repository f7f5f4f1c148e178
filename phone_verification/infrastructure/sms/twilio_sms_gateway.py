from __future__ import annotations

from typing import Optional

import httpx

from phone_verification.domain.errors import SmsDeliveryError
from phone_verification.domain.ports.sms_gateway import SmsGatewayPort

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSmsGateway(SmsGatewayPort):
    """Sends SMS through Twilio's Messages REST resource."""

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        sender: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        api_base: str = TWILIO_API_BASE,
    ) -> None:
        self._auth = (account_sid, auth_token)
        self._sender = sender
        self._url = f"{api_base.rstrip('/')}/Accounts/{account_sid}/Messages.json"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, *, to: str, body: str) -> None:
        data = {"From": self._sender, "To": to, "Body": body}
        try:
            resp = await self._client.post(self._url, data=data, auth=self._auth)
        except httpx.HTTPError as e:
            raise SmsDeliveryError(f"Twilio HTTP error: {e}") from e
        if resp.status_code not in (200, 201):
            raise SmsDeliveryError(
                f"Twilio responded {resp.status_code}: {resp.text[:200]}"
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
