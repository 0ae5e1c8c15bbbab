"""
SMS gateway.

Sends one text message through the provider named by the SMS_PROVIDER
setting and reports the outcome. Provider errors of any kind are converted
into a `failed` result; nothing is raised to the caller.
"""

import logging
from dataclasses import dataclass
from typing import Any

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from twilio.base.exceptions import TwilioRestException
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from .models import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    outcome: str
    provider: str
    info: Any = None

    @property
    def sent(self) -> bool:
        return self.outcome == Outcome.SENT


class MockProvider:
    """Logs instead of sending. Always succeeds."""

    name = "mock"

    def send(self, to: str, body: str):
        logger.info(f"[SMS MOCK] -> {to}: {body}")
        return {"body": body}


class TwilioProvider:
    """Twilio Programmable Messaging."""

    name = "twilio"

    def __init__(self):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.messaging_service_sid = settings.TWILIO_MESSAGING_SERVICE_SID
        self.from_number = settings.TWILIO_FROM_NUMBER

        if not self.account_sid or not self.auth_token:
            raise ImproperlyConfigured("TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN required")
        if not self.messaging_service_sid and not self.from_number:
            raise ImproperlyConfigured(
                "TWILIO_MESSAGING_SERVICE_SID or TWILIO_FROM_NUMBER required"
            )

        self.client = Client(
            self.account_sid,
            self.auth_token,
            http_client=TwilioHttpClient(timeout=settings.SMS_TIMEOUT_SECONDS),
        )

    def send(self, to: str, body: str):
        params = {"to": to, "body": body}
        if self.messaging_service_sid:
            params["messaging_service_sid"] = self.messaging_service_sid
        else:
            params["from_"] = self.from_number

        message = self.client.messages.create(**params)
        return {"sid": message.sid, "status": message.status}


PROVIDERS = {
    "mock": MockProvider,
    "none": MockProvider,
    "twilio": TwilioProvider,
}


def send_message(to: str, body: str) -> SendResult:
    """
    Send a single SMS.

    Args:
        to: Recipient number in international format
        body: Message text

    Returns:
        SendResult with outcome `sent` or `failed` and provider metadata
    """
    name = settings.SMS_PROVIDER
    provider_cls = PROVIDERS.get(name)
    if provider_cls is None:
        logger.error(f"Unknown SMS provider: {name!r}")
        return SendResult(Outcome.FAILED, name or "unknown", "No provider implemented")

    try:
        info = provider_cls().send(to, body)
    except TwilioRestException as e:
        logger.error(f"Twilio error sending to {to}: {e.code} - {e.msg}")
        return SendResult(
            Outcome.FAILED, name, {"code": e.code, "status": e.status, "message": str(e.msg)}
        )
    except Exception as e:
        logger.error(f"SMS send error via {name} to {to}: {e}")
        return SendResult(Outcome.FAILED, name, str(e))

    logger.info(f"SMS sent via {name} to {to}")
    return SendResult(Outcome.SENT, name, info)
