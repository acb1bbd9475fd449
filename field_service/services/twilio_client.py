"""Twilio client configuration for SMS messaging."""

import logging
from dataclasses import dataclass

import requests
from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.rest import Client

from field_service.core.config import (
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_SMS_FROM,
)

logger = logging.getLogger(__name__)

# Message states in which Twilio has already given up on delivery.
FAILED_MESSAGE_STATUSES = {"failed", "undelivered", "canceled"}

# REST status codes that mean the request never got past authentication.
CREDENTIAL_ERROR_STATUSES = {401, 403}

if not TWILIO_ACCOUNT_SID or not TWILIO_AUTH_TOKEN or not TWILIO_SMS_FROM:
    logger.warning(
        "Twilio credentials not set. SMS messaging will fail at runtime."
    )

client: Client | None = None
if TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN:
    client = Client(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN)


class SmsProviderError(Exception):
    """The send never reached the provider (config, auth or transport)."""


@dataclass(frozen=True)
class SmsDispatchResult:
    """Provider verdict for a message it actually received."""

    success: bool
    sid: str | None = None
    status: str | None = None
    error: str | None = None

    def as_payload(self) -> dict:
        payload = {"success": self.success, "sid": self.sid, "status": self.status}
        if self.error:
            payload["error"] = self.error
        return payload


def send_sms(to: str, body: str) -> SmsDispatchResult:
    """Send an SMS via Twilio.

    Returns a result when Twilio accepted or rejected the message and raises
    SmsProviderError when the request could not be delivered to Twilio.
    """
    if client is None or not TWILIO_SMS_FROM:
        raise SmsProviderError("Twilio client is not configured.")

    to = (to or "").replace(" ", "")

    try:
        message = client.messages.create(from_=TWILIO_SMS_FROM, to=to, body=body)
    except TwilioRestException as exc:
        if exc.status in CREDENTIAL_ERROR_STATUSES:
            raise SmsProviderError(f"Twilio rejected the credentials: {exc.msg}") from exc
        logger.warning("Twilio rejected SMS to %s: %s", to, exc.msg)
        return SmsDispatchResult(success=False, status="failed", error=str(exc.msg))
    except (TwilioException, requests.RequestException) as exc:
        raise SmsProviderError(f"Could not reach Twilio: {exc}") from exc

    if message.status in FAILED_MESSAGE_STATUSES:
        logger.warning("Twilio reported SMS %s as %s", message.sid, message.status)
        return SmsDispatchResult(
            success=False,
            sid=message.sid,
            status=message.status,
            error=message.error_message,
        )

    logger.info("SMS sent to %s (SID: %s)", to, message.sid)
    return SmsDispatchResult(success=True, sid=message.sid, status=message.status)
