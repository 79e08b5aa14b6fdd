import os
import tempfile

import pytest

os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'feedback-relay-test-logs'))

from app import app
from services.feedback_relay import FeedbackRelay, RelayConfig


class FakeProvider:
    """Records outbound emails instead of sending them."""

    name = 'fake'

    def __init__(self, api_key='re_test_key'):
        self.api_key = api_key
        self.fail_with = None
        self.sent = []

    def has_credentials(self):
        return bool(self.api_key)

    def send(self, email):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(email)
        return f'msg_{len(self.sent)}'


@pytest.fixture
def provider():
    fake = FakeProvider()
    original = app.extensions['feedback_relay']
    app.extensions['feedback_relay'] = FeedbackRelay(
        RelayConfig(from_email='relay@test.local', to_email='owner@test.local'),
        fake,
    )
    yield fake
    app.extensions['feedback_relay'] = original


@pytest.fixture
def client(provider):
    app.config.update(TESTING=True)
    with app.test_client() as c:
        yield c
