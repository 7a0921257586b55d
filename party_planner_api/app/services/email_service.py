"""
E-mail delivery through SendGrid's v3 HTTP API.

``SendGridEmailSender.send`` is blocking; endpoints run it in the
thread pool.  Missing credentials and provider failures both surface as
``UpstreamError``.
"""

import logging
from typing import Optional

import requests
from fastapi import Depends

from ..core.config import Settings, get_settings
from ..core.errors import UpstreamError
from ..schemas.mail import EmailSend, EmailSent

logger = logging.getLogger(__name__)


class SendGridEmailSender:
    """Send e-mails with the SendGrid v3 ``mail/send`` endpoint.

    Parameters
    ----------
    api_key : str
        SendGrid API key.
    sender : str
        Address used as ``from``.
    api_url : str
        Endpoint URL, overridable for tests or regional endpoints.
    timeout : float
        Seconds to wait for the provider.
    """

    def __init__(self, api_key: str, sender: str, api_url: str, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self.timeout = timeout

    def build_payload(self, message: EmailSend) -> dict:
        return {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": self.sender},
            "subject": message.subject,
            "content": [
                {"type": "text/plain", "value": message.text},
                {"type": "text/html", "value": message.html},
            ],
        }

    def send(self, message: EmailSend) -> EmailSent:
        if not self.api_key or not self.sender:
            logger.error("E-mail requested but EMAIL_API_KEY / EMAIL_SENDER are not configured")
            raise UpstreamError("E-mail provider is not configured")
        try:
            response = requests.post(
                self.api_url,
                json=self.build_payload(message),
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Error sending e-mail to %s: %s", message.to, exc)
            raise UpstreamError("Error sending e-mail") from exc
        if response.status_code >= 300:
            logger.error("SendGrid answered %s: %s", response.status_code, response.text)
            raise UpstreamError("Error sending e-mail")
        message_id: Optional[str] = response.headers.get("X-Message-Id")
        logger.info("E-mail sent to %s (%s)", message.to, message_id)
        return EmailSent(id=message_id)


def get_email_sender(settings: Settings = Depends(get_settings)) -> SendGridEmailSender:
    return SendGridEmailSender(
        api_key=settings.email_api_key,
        sender=settings.email_sender,
        api_url=settings.email_api_url,
        timeout=settings.outbound_timeout_seconds,
    )
