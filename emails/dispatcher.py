import logging
from dataclasses import dataclass
from typing import Any

import httpx

from core.config import settings

logger = logging.getLogger("emails.dispatcher")

DEFAULT_FAILURE_MESSAGE = "Failed to send email"


class DispatchError(Exception):
    status_code = 500


class ProviderRejectedError(DispatchError):
    status_code = 400


@dataclass
class OutboundRequest:
    to: Any
    subject: Any
    text: Any


async def get_provider_client():
    async with httpx.AsyncClient() as client:
        yield client


async def send_email(client: httpx.AsyncClient, request: OutboundRequest) -> str:
    """Relay one message to Resend and return the provider's message id."""
    payload = {
        "from": settings.MAIL_FROM,
        "to": request.to,
        "subject": request.subject,
        "text": request.text,
    }
    headers = {"Authorization": f"Bearer {settings.RESEND_API_KEY}"}

    try:
        response = await client.post(settings.RESEND_API_URL, json=payload, headers=headers)
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Email provider request failed: %s", exc)
        raise DispatchError(f"{DEFAULT_FAILURE_MESSAGE}: {exc}") from exc

    if not response.is_success:
        message = (data.get("message") if isinstance(data, dict) else None) or DEFAULT_FAILURE_MESSAGE
        logger.warning("Email provider rejected message to %s (%s): %s", request.to, response.status_code, message)
        raise ProviderRejectedError(message)

    if not isinstance(data, dict):
        raise DispatchError(f"{DEFAULT_FAILURE_MESSAGE}: unexpected provider response")

    logger.info("Sent email to %s id=%s", request.to, data.get("id"))
    return data.get("id")
