#!/usr/bin/env python3
"""Send (or preview) a feedback email from the shell.
Uses the same relay and environment as the web service.
"""

from __future__ import annotations

import argparse
import sys

from app import app
from services.feedback_relay import FeedbackSubmission, get_relay


def build_parser():
    parser = argparse.ArgumentParser(description='Smarthome feedback relay utility')
    parser.add_argument('--message', required=True)
    parser.add_argument('--subject')
    parser.add_argument('--user-email')
    parser.add_argument('--user-agent', default='send_feedback.py')
    parser.add_argument('--dry-run', action='store_true', help='print the rendered HTML instead of sending')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    submission = FeedbackSubmission.from_payload({
        'message': args.message,
        'subject': args.subject,
        'userEmail': args.user_email,
        'userAgent': args.user_agent,
    })

    with app.app_context():
        relay = get_relay()
        if args.dry_run:
            error = relay.validate(submission)
            if error:
                print(error.value)
                return 1
            print(relay.render(submission).html)
            return 0

        result = relay.submit(submission)

    if not result.ok:
        print(result.error.value)
        return 1
    print(f"ok id={result.message_id}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
