# app/services/webhook_service.py
import httpx
from loguru import logger

from app.core.config import settings
from app.core.errors import WebhookDeliveryError


def webhook_url_for(department_id: str) -> str | None:
    """
    Per-department URL from DISCORD_WEBHOOKS, falling back to the default
    webhook. None means no webhook is configured.
    """
    url = settings.DISCORD_WEBHOOKS.get(department_id) or settings.DISCORD_DEFAULT_WEBHOOK
    return url.strip() if url and url.strip() else None


async def send_webhook(url: str, payload: dict) -> int:
    """
    POSTs the payload as JSON. A transport error or any non-2xx answer
    raises WebhookDeliveryError; nothing is retried.
    """
    async with httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT_SECONDS) as client:
        try:
            response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Discord webhook connection error: {e}")
            raise WebhookDeliveryError("Could not reach the Discord webhook") from e

    if not response.is_success:
        logger.error(f"Discord webhook rejected the payload: {response.status_code} {response.text[:200]}")
        raise WebhookDeliveryError(
            f"Discord webhook returned HTTP {response.status_code}",
            status_code=response.status_code,
        )

    return response.status_code
