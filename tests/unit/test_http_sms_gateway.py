import json
import pytest
import httpx

from phone_verification.domain.errors import SmsDeliveryError
from phone_verification.infrastructure.sms.http_sms_gateway import HttpSmsGateway


@pytest.mark.asyncio
async def test_send_success_without_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["json"] = json.loads(request.content.decode("utf-8"))
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(202, text="Accepted")

    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport)

    gateway = HttpSmsGateway(base_url="http://sms-mock:8026/", client=client)

    await gateway.send(to="+15551234567", body="Your code is 048213")
    assert seen["url"] == "http://sms-mock:8026/messages"
    assert seen["json"] == {"to": "+15551234567", "body": "Your code is 048213"}
    assert seen["auth"] is None

    await client.aclose()


@pytest.mark.asyncio
async def test_send_with_token_and_sender():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["json"] = json.loads(request.content.decode("utf-8"))
        return httpx.Response(200, json={"ok": True})

    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport)

    gateway = HttpSmsGateway(
        base_url="http://sms-mock:8026",
        client=client,
        send_path="sms",
        api_token="tok-123",
        sender="Remore",
    )

    await gateway.send(to="+15551234567", body="hi")
    assert seen["auth"] == "Bearer tok-123"
    assert seen["json"]["from"] == "Remore"

    await client.aclose()


@pytest.mark.asyncio
async def test_send_non_2xx_raises_delivery_error():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(422, text="unroutable")

    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport)

    gateway = HttpSmsGateway(base_url="http://sms-mock:8026", client=client)

    with pytest.raises(SmsDeliveryError) as ei:
        await gateway.send(to="+15551234567", body="B")

    msg = str(ei.value)
    assert "SMS gateway responded 422" in msg
    assert "unroutable" in msg

    await client.aclose()


@pytest.mark.asyncio
async def test_network_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    transport = httpx.MockTransport(handler)
    client = httpx.AsyncClient(transport=transport)

    gateway = HttpSmsGateway(base_url="http://sms-mock:8026", client=client)

    with pytest.raises(SmsDeliveryError) as ei:
        await gateway.send(to="+15551234567", body="B")

    assert "SMS HTTP error:" in str(ei.value)

    await client.aclose()


@pytest.mark.asyncio
async def test_aclose_closes_owned_client_only():
    owned = HttpSmsGateway(base_url="http://sms-mock:8026")
    await owned.aclose()
    assert owned._client.is_closed  # type: ignore[attr-defined]

    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    transport = httpx.MockTransport(handler)
    shared_client = httpx.AsyncClient(transport=transport)
    not_owned = HttpSmsGateway(base_url="http://sms-mock:8026", client=shared_client)

    await not_owned.aclose()
    assert shared_client.is_closed is False

    await shared_client.aclose()
