import pytest
import resend
from flask import Flask
from flask_mail import Mail

from services.email_service import OutboundEmail, ResendProvider, SmtpProvider, build_provider
from services.feedback_relay import RelayConfig


def _email():
    return OutboundEmail(
        from_email='relay@test.local',
        to_email='owner@test.local',
        subject='[Smarthome Feedback] Feedback',
        html='<p>hello</p>',
        text='hello',
    )


def test_resend_provider_sends_params(monkeypatch):
    calls = []

    def fake_send(params):
        calls.append(params)
        return {'id': 'abc123'}

    monkeypatch.setattr(resend, 'api_key', None)
    monkeypatch.setattr(resend.Emails, 'send', fake_send)

    message_id = ResendProvider('re_live_key').send(_email())

    assert message_id == 'abc123'
    assert resend.api_key == 're_live_key'
    assert calls == [{
        'from': 'relay@test.local',
        'to': 'owner@test.local',
        'subject': '[Smarthome Feedback] Feedback',
        'html': '<p>hello</p>',
        'text': 'hello',
    }]


def test_resend_provider_propagates_errors(monkeypatch):
    def fake_send(params):
        raise RuntimeError('rate limited')

    monkeypatch.setattr(resend, 'api_key', None)
    monkeypatch.setattr(resend.Emails, 'send', fake_send)

    with pytest.raises(RuntimeError):
        ResendProvider('re_live_key').send(_email())


def test_resend_provider_credentials():
    assert ResendProvider('re_live_key').has_credentials()
    assert not ResendProvider(None).has_credentials()
    assert not ResendProvider('').has_credentials()


def test_smtp_provider_sends_through_flask_mail():
    smtp_app = Flask(__name__)
    smtp_app.config.update(TESTING=True, MAIL_SUPPRESS_SEND=True)
    mail_ext = Mail(smtp_app)
    provider = SmtpProvider(mail_ext, 'user', 'secret')

    with smtp_app.app_context(), mail_ext.record_messages() as outbox:
        message_id = provider.send(_email())

    assert len(outbox) == 1
    msg = outbox[0]
    assert msg.recipients == ['owner@test.local']
    assert msg.sender == 'relay@test.local'
    assert msg.html == '<p>hello</p>'
    assert msg.body == 'hello'
    assert message_id == msg.msgId


def test_smtp_provider_needs_username_and_password():
    assert SmtpProvider(Mail(), 'user', 'secret').has_credentials()
    assert not SmtpProvider(Mail(), 'user', None).has_credentials()


def test_build_provider_selects_by_name():
    assert isinstance(build_provider(RelayConfig(provider='resend', resend_api_key='k')), ResendProvider)
    assert isinstance(build_provider(RelayConfig(provider='smtp')), SmtpProvider)
    with pytest.raises(ValueError):
        build_provider(RelayConfig(provider='carrier-pigeon'))
