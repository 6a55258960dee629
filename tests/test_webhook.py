import httpx
import pytest
from unittest.mock import patch

from app.core.config import settings
from app.core.errors import WebhookDeliveryError
from app.services.webhook_service import send_webhook, webhook_url_for

RealAsyncClient = httpx.AsyncClient


def client_with(handler):
    def factory(*args, **kwargs):
        return RealAsyncClient(*args, transport=httpx.MockTransport(handler), **kwargs)
    return factory


def test_webhook_url_falls_back_to_default(monkeypatch):
    monkeypatch.setattr(settings, "DISCORD_WEBHOOKS", {"staff": "https://discord.test/staff"})
    monkeypatch.setattr(settings, "DISCORD_DEFAULT_WEBHOOK", "https://discord.test/default")

    assert webhook_url_for("staff") == "https://discord.test/staff"
    assert webhook_url_for("fwc") == "https://discord.test/default"


def test_no_webhook_configured(monkeypatch):
    monkeypatch.setattr(settings, "DISCORD_WEBHOOKS", {})
    monkeypatch.setattr(settings, "DISCORD_DEFAULT_WEBHOOK", None)

    assert webhook_url_for("ocso") is None


@pytest.mark.asyncio
async def test_send_webhook_posts_json():
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["body"] = request.content
        return httpx.Response(204)

    with patch("app.services.webhook_service.httpx.AsyncClient", new=client_with(handler)):
        status = await send_webhook("https://discord.test/hook", {"embeds": []})

    assert status == 204
    assert seen["method"] == "POST"
    assert b"embeds" in seen["body"]


@pytest.mark.asyncio
async def test_non_2xx_is_a_hard_failure():
    with patch(
        "app.services.webhook_service.httpx.AsyncClient",
        new=client_with(lambda request: httpx.Response(400, json={"message": "Invalid Form Body"})),
    ):
        with pytest.raises(WebhookDeliveryError) as exc:
            await send_webhook("https://discord.test/hook", {"embeds": []})

    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_transport_error_is_a_hard_failure():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with patch("app.services.webhook_service.httpx.AsyncClient", new=client_with(handler)):
        with pytest.raises(WebhookDeliveryError):
            await send_webhook("https://discord.test/hook", {"embeds": []})
