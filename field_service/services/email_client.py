"""Outbound email through the Resend HTTP API."""

import logging

import requests

from field_service.core.config import (
    EMAIL_TIMEOUT_SECONDS,
    REPORT_EMAIL_FROM,
    RESEND_API_KEY,
    RESEND_API_URL,
)

logger = logging.getLogger(__name__)

if not RESEND_API_KEY:
    logger.warning("RESEND_API_KEY not set. Report emails will fail at runtime.")


class EmailSendError(Exception):
    pass


def _provider_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300] or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)[:300]
    return str(body)[:300]


def send_html_email(to: list[str], subject: str, html: str, sender: str = REPORT_EMAIL_FROM) -> str | None:
    """Send one HTML email and return the provider's message id."""
    if not RESEND_API_KEY:
        raise EmailSendError("RESEND_API_KEY is not set")
    if not to:
        raise EmailSendError("Recipient(s) missing")

    try:
        resp = requests.post(
            RESEND_API_URL,
            headers={
                "Authorization": f"Bearer {RESEND_API_KEY}",
                "Content-Type": "application/json",
            },
            json={
                "from": sender,
                "to": to,
                "subject": subject,
                "html": html,
            },
            timeout=EMAIL_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        raise EmailSendError(str(exc)) from exc

    if resp.status_code >= 400:
        raise EmailSendError(_provider_message(resp))

    try:
        body = resp.json()
    except ValueError:
        body = {}
    email_id = body.get("id") if isinstance(body, dict) else None
    logger.info("Email sent to %s (id=%s)", ", ".join(to), email_id)
    return email_id
