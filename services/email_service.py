"""Email delivery providers used by the feedback relay."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import resend
from flask_mail import Mail, Message

mail = Mail()
logger = logging.getLogger(__name__)


@dataclass
class OutboundEmail:
    from_email: str
    to_email: str
    subject: str
    html: str
    text: str


def init_mail(app):
    mail.init_app(app)


class ResendProvider:
    """Delivers through the Resend HTTP API."""

    name = 'resend'

    def __init__(self, api_key: Optional[str]):
        self.api_key = api_key

    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def send(self, email: OutboundEmail) -> Optional[str]:
        resend.api_key = self.api_key
        response = resend.Emails.send({
            "from": email.from_email,
            "to": email.to_email,
            "subject": email.subject,
            "html": email.html,
            "text": email.text,
        })
        return response.get("id") if isinstance(response, dict) else None


class SmtpProvider:
    """Delivers through the app's Flask-Mail extension. Needs an app context."""

    name = 'smtp'

    def __init__(self, mail_ext: Mail, username: Optional[str], password: Optional[str]):
        self.mail = mail_ext
        self.username = username
        self.password = password

    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def send(self, email: OutboundEmail) -> Optional[str]:
        msg = Message(
            subject=email.subject,
            sender=email.from_email,
            recipients=[email.to_email],
            html=email.html,
            body=email.text,
        )
        self.mail.send(msg)
        return msg.msgId


def build_provider(config, mail_ext: Mail = mail):
    if config.provider == ResendProvider.name:
        return ResendProvider(config.resend_api_key)
    if config.provider == SmtpProvider.name:
        return SmtpProvider(mail_ext, config.smtp_username, config.smtp_password)
    raise ValueError(f"Unknown MAIL_PROVIDER: {config.provider!r}")
