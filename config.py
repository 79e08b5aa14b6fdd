"""
Configuration for the Smarthome feedback relay
Loads settings from environment variables
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _split_csv(value):
    return [item.strip() for item in (value or '').split(',') if item.strip()]


class Config:
    """Application configuration"""

    APP_ENV = os.environ.get('APP_ENV', 'production')
    DEBUG = os.environ.get('FLASK_ENV') == 'development' or os.environ.get('FLASK_DEBUG') == '1'

    # Feedback delivery
    MAIL_PROVIDER = os.environ.get('MAIL_PROVIDER', 'resend')
    RESEND_API_KEY = os.environ.get('RESEND_API_KEY')
    FEEDBACK_FROM_EMAIL = os.environ.get('FEEDBACK_FROM_EMAIL') or 'no-reply@smarthome.local'
    FEEDBACK_TO_EMAIL = os.environ.get('FEEDBACK_TO_EMAIL') or 'owner@example.com'
    FEEDBACK_SUBJECT_PREFIX = os.environ.get('FEEDBACK_SUBJECT_PREFIX') or '[Smarthome Feedback]'

    # SMTP (MAIL_PROVIDER=smtp)
    MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.sendgrid.net')
    MAIL_PORT = int(os.environ.get('MAIL_PORT', '587'))
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', '1') == '1'
    MAIL_USE_SSL = os.environ.get('MAIL_USE_SSL', '0') == '1'
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')

    # CORS
    CORS_ALLOWED_ORIGINS = _split_csv(
        os.environ.get('CORS_ALLOWED_ORIGINS')
        or 'https://mot90.github.io,http://localhost:8000,http://127.0.0.1:8000'
    )

    # Rate limiting
    FEEDBACK_RATE_LIMIT = os.environ.get('FEEDBACK_RATE_LIMIT', '20 per hour')
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # Public backend client settings
    FIREBASE_API_KEY = os.environ.get('FIREBASE_API_KEY', '')
    FIREBASE_AUTH_DOMAIN = os.environ.get('FIREBASE_AUTH_DOMAIN', '')
    FIREBASE_PROJECT_ID = os.environ.get('FIREBASE_PROJECT_ID', '')
    FIREBASE_STORAGE_BUCKET = os.environ.get('FIREBASE_STORAGE_BUCKET', '')
    FIREBASE_MESSAGING_SENDER_ID = os.environ.get('FIREBASE_MESSAGING_SENDER_ID', '')
    FIREBASE_APP_ID = os.environ.get('FIREBASE_APP_ID', '')
    FIREBASE_MEASUREMENT_ID = os.environ.get('FIREBASE_MEASUREMENT_ID', '')

    # Monitoring / logging
    SENTRY_DSN = os.environ.get('SENTRY_DSN')
    SENTRY_TRACES_SAMPLE_RATE = float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE', '0.1'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')
