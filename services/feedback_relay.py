"""Feedback relay: validate a submission, render it as email and hand it to a provider.

The relay is stateless. One instance is built at start-up by ``init_relay``
and shared by every request; submissions are never stored.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from flask import current_app, render_template

from services.email_service import OutboundEmail, build_provider, mail

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = 'Feedback'
DEFAULT_SENDER_EMAIL = 'anon@smarthome.local'
MIN_MESSAGE_LENGTH = 10


class ErrorKind(str, Enum):
    SHORT_MESSAGE = 'short_message'
    MISSING_CREDENTIALS = 'missing_resend_api_key'
    SEND_FAILED = 'send_failed'


@dataclass(frozen=True)
class DeliveryResult:
    error: Optional[ErrorKind] = None
    message_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _now_ms() -> int:
    return int(time.time() * 1000)


def _coerce_timestamp(value) -> Optional[int]:
    if value is None or value == '' or isinstance(value, bool):
        return None
    try:
        millis = int(float(value))
        # reject values that cannot be rendered as a date
        datetime.fromtimestamp(millis // 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning("Ignoring unusable feedback timestamp: %r", value)
        return None
    return millis


@dataclass
class FeedbackSubmission:
    message: str = ''
    subject: str = DEFAULT_SUBJECT
    sender_email: str = DEFAULT_SENDER_EMAIL
    user_agent: str = ''
    timestamp: int = field(default_factory=_now_ms)

    @classmethod
    def from_payload(cls, payload) -> 'FeedbackSubmission':
        """Build a submission from the wire shape used by both entry points.

        Empty or missing optional fields fall back to their defaults, and the
        timestamp falls back to the time of receipt.
        """
        if not isinstance(payload, dict):
            payload = {}
        timestamp = _coerce_timestamp(payload.get('timestamp'))
        return cls(
            message=str(payload.get('message') or ''),
            subject=str(payload.get('subject') or DEFAULT_SUBJECT),
            sender_email=str(payload.get('userEmail') or DEFAULT_SENDER_EMAIL),
            user_agent=str(payload.get('userAgent') or ''),
            timestamp=timestamp if timestamp is not None else _now_ms(),
        )

    @property
    def sent_at(self) -> str:
        seconds, millis = divmod(self.timestamp, 1000)
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class RelayConfig:
    provider: str = 'resend'
    resend_api_key: Optional[str] = None
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    from_email: str = 'no-reply@smarthome.local'
    to_email: str = 'owner@example.com'
    subject_prefix: str = '[Smarthome Feedback]'

    @classmethod
    def from_mapping(cls, config) -> 'RelayConfig':
        return cls(
            provider=(config.get('MAIL_PROVIDER') or 'resend').lower(),
            resend_api_key=config.get('RESEND_API_KEY'),
            smtp_username=config.get('MAIL_USERNAME'),
            smtp_password=config.get('MAIL_PASSWORD'),
            from_email=config.get('FEEDBACK_FROM_EMAIL') or cls.from_email,
            to_email=config.get('FEEDBACK_TO_EMAIL') or cls.to_email,
            subject_prefix=config.get('FEEDBACK_SUBJECT_PREFIX') or cls.subject_prefix,
        )


@dataclass
class RenderedFeedback:
    html: str
    text: str


class FeedbackRelay:
    def __init__(self, config: RelayConfig, provider):
        self.config = config
        self.provider = provider

    @staticmethod
    def validate(submission: FeedbackSubmission) -> Optional[ErrorKind]:
        if not submission.message or len(submission.message.strip()) < MIN_MESSAGE_LENGTH:
            return ErrorKind.SHORT_MESSAGE
        return None

    def render(self, submission: FeedbackSubmission) -> RenderedFeedback:
        context = {
            'subject': submission.subject,
            'sender_email': submission.sender_email,
            'sent_at': submission.sent_at,
            'message': submission.message,
            'user_agent': submission.user_agent,
        }
        return RenderedFeedback(
            html=render_template('emails/feedback.html', **context),
            text=render_template('emails/feedback.txt', **context),
        )

    def deliver(self, submission: FeedbackSubmission, rendered: RenderedFeedback) -> DeliveryResult:
        email = OutboundEmail(
            from_email=self.config.from_email,
            to_email=self.config.to_email,
            subject=f"{self.config.subject_prefix} {submission.subject}",
            html=rendered.html,
            text=rendered.text,
        )
        try:
            message_id = self.provider.send(email)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Feedback delivery failed via %s: %s", self.provider.name, exc)
            return DeliveryResult(error=ErrorKind.SEND_FAILED)
        logger.info("Feedback accepted by %s: id=%s to=%s", self.provider.name, message_id, email.to_email)
        return DeliveryResult(message_id=message_id)

    def submit(self, submission: FeedbackSubmission) -> DeliveryResult:
        if not self.provider.has_credentials():
            logger.error("Feedback provider %s is missing credentials", self.provider.name)
            return DeliveryResult(error=ErrorKind.MISSING_CREDENTIALS)

        error = self.validate(submission)
        if error:
            return DeliveryResult(error=error)

        return self.deliver(submission, self.render(submission))


def init_relay(app) -> FeedbackRelay:
    config = RelayConfig.from_mapping(app.config)
    relay = FeedbackRelay(config, build_provider(config, mail))
    app.extensions['feedback_relay'] = relay
    return relay


def get_relay() -> FeedbackRelay:
    return current_app.extensions['feedback_relay']
