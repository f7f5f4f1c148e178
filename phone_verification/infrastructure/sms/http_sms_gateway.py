from __future__ import annotations

from typing import Optional, Dict
import httpx

from phone_verification.domain.errors import SmsDeliveryError
from phone_verification.domain.ports.sms_gateway import SmsGatewayPort


class HttpSmsGateway(SmsGatewayPort):
    def __init__(
        self,
        base_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/messages",
        api_token: str | None = None,
        sender: str | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._api_token = api_token
        self._sender = sender
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, *, to: str, body: str) -> None:
        headers: Dict[str, str] = {}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"

        url = f"{self._base_url}{self._send_path}"
        payload = {"to": to, "body": body}
        if self._sender:
            payload["from"] = self._sender

        try:
            resp = await self._client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise SmsDeliveryError(f"SMS HTTP error: {e}") from e
        if not (200 <= resp.status_code < 300):
            text = resp.text[:200]
            raise SmsDeliveryError(f"SMS gateway responded {resp.status_code}: {text}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
