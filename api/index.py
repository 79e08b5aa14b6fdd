"""
Vercel serverless entry point for the Smarthome feedback relay.

Vercel routes /api/* to this function. Set RESEND_API_KEY, FEEDBACK_TO_EMAIL
and FEEDBACK_FROM_EMAIL in the Vercel project settings. The function runs on
a read-only filesystem except for /tmp, so also set LOG_DIR=/tmp/logs.

Rate limits use in-memory storage by default, which is per instance on
serverless; point RATELIMIT_STORAGE_URI at Redis for a shared limit.
"""

import sys
import os

# Make the project root importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Import the Flask app object
from app import app

# Vercel expects a handler named `app` at module level
# The @vercel/python runtime calls app(environ, start_response) directly
