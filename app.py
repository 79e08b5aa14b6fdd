"""
Smarthome Feedback Relay - Flask Application
Receives feedback from the Smarthome Simulator front end and forwards it by email
"""

import os
import logging
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from werkzeug.exceptions import MethodNotAllowed

from config import Config
from services.client_config import ClientConfig
from services.email_service import init_mail
from services.feedback_relay import ErrorKind, FeedbackSubmission, get_relay, init_relay

# Initialize Flask app
app = Flask(__name__)
app.config.from_object(Config)


@app.after_request
def _vary_on_origin(response):
    response.vary.add('Origin')
    return response


# CORS for the browser-facing entry points
CORS(
    app,
    resources=[r'/api/*', r'/callable/*'],
    origins=app.config['CORS_ALLOWED_ORIGINS'],
    methods=['POST', 'OPTIONS'],
    allow_headers=['Content-Type'],
)

# Initialize basic rate limiting
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=app.config.get('RATELIMIT_STORAGE_URI', 'memory://'),
    strategy='fixed-window',
    default_limits=["200 per day", "50 per hour"],
)
limiter.init_app(app)


@limiter.request_filter
def _rate_limit_exempt_for_tests():
    return app.config.get('TESTING', False)


# Initialize email delivery and the feedback relay
init_mail(app)
init_relay(app)

os.makedirs(app.config.get('LOG_DIR', 'logs'), exist_ok=True)
_file_handler = RotatingFileHandler(
    os.path.join(app.config.get('LOG_DIR', 'logs'), 'app.log'),
    maxBytes=5 * 1024 * 1024,
    backupCount=5,
)
_file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
if not any(isinstance(h, RotatingFileHandler) for h in app.logger.handlers):
    app.logger.addHandler(_file_handler)

if app.config.get('SENTRY_DSN'):
    sentry_sdk.init(
        dsn=app.config.get('SENTRY_DSN'),
        integrations=[FlaskIntegration()],
        traces_sample_rate=app.config.get('SENTRY_TRACES_SAMPLE_RATE', 0.1),
    )

FEEDBACK_STATUS = {
    ErrorKind.SHORT_MESSAGE: 400,
    ErrorKind.MISSING_CREDENTIALS: 500,
    ErrorKind.SEND_FAILED: 500,
}

# (callable code, human readable message) per relay failure
CALLABLE_ERRORS = {
    ErrorKind.MISSING_CREDENTIALS: ('failed-precondition', 'Email service is not configured'),
    ErrorKind.SHORT_MESSAGE: ('invalid-argument', 'Message is too short'),
    ErrorKind.SEND_FAILED: ('internal', 'Could not send email'),
}

CALLABLE_HTTP_STATUS = {
    'invalid-argument': 400,
    'failed-precondition': 400,
    'internal': 500,
}


class CallableError(Exception):
    """Failure returned to callable clients as {"error": {"status", "message"}}."""

    def __init__(self, code, message):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def status(self):
        return self.code.upper().replace('-', '_')

    @property
    def http_status(self):
        return CALLABLE_HTTP_STATUS.get(self.code, 500)


def _feedback_limit():
    return app.config.get('FEEDBACK_RATE_LIMIT', '20 per hour')


# ===== FEEDBACK ROUTES =====

@app.route('/api/send-feedback', methods=['POST'])
@limiter.limit(_feedback_limit)
def send_feedback():
    """HTTP entry point used by the front end's feedback form"""
    payload = request.get_json(silent=True)
    submission = FeedbackSubmission.from_payload(payload)
    app.logger.info('Feedback received via http: subject=%s sender=%s', submission.subject, submission.sender_email)

    result = get_relay().submit(submission)
    if not result.ok:
        return jsonify({'ok': False, 'error': result.error.value}), FEEDBACK_STATUS[result.error]
    return jsonify({'ok': True}), 200


@app.route('/callable/sendFeedbackEmail', methods=['POST'])
@limiter.limit(_feedback_limit)
def send_feedback_callable():
    """Callable entry point: request {"data": {...}}, response {"result": {...}}"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or 'data' not in body:
        raise CallableError('invalid-argument', 'Request body must contain a data object')

    submission = FeedbackSubmission.from_payload(body['data'])
    app.logger.info('Feedback received via callable: subject=%s sender=%s', submission.subject, submission.sender_email)

    result = get_relay().submit(submission)
    if not result.ok:
        raise CallableError(*CALLABLE_ERRORS[result.error])
    return jsonify({'result': {'ok': True}}), 200


@app.route('/client-config')
def client_config():
    """Public settings for the front end's hosted backend SDK"""
    config = ClientConfig.from_mapping(app.config)
    if not config.is_valid():
        app.logger.warning('Client config requested but FIREBASE_API_KEY/FIREBASE_PROJECT_ID are not set')
        return jsonify({'ok': False, 'error': 'client_config_missing'}), 503
    return jsonify({'ok': True, 'config': config.to_public_dict()}), 200


@app.route('/health')
def health():
    return jsonify({'status': 'ok', 'service': 'smarthome-feedback-relay'}), 200


# ===== ERROR HANDLERS =====


@app.errorhandler(CallableError)
def callable_error(error):
    return jsonify({'error': {'status': error.status, 'message': error.message}}), error.http_status


@app.errorhandler(MethodNotAllowed)
def method_not_allowed(error):
    return jsonify({'ok': False, 'error': 'method_not_allowed'}), 405


@app.errorhandler(429)
def rate_limited(error):
    return jsonify({'ok': False, 'error': 'rate_limited'}), 429


@app.errorhandler(404)
def not_found(error):
    return jsonify({'ok': False, 'error': 'not_found'}), 404


@app.errorhandler(500)
def internal_error(error):
    return jsonify({'ok': False, 'error': 'internal_error'}), 500

# ===== APPLICATION ENTRY POINT =====

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    app.run(host='0.0.0.0', port=port, debug=app.config['DEBUG'])
