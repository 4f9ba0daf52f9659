"""
Invoke the order notifier Lambda handler locally.

Loads a .env file, wraps order JSON files in an SQS-shaped event and calls
lambda_handler. With --dry-run no AWS call is made.

    python -m order_notifier.invoke_local orders/o1.json orders/o2.json --dry-run
"""
import argparse
import json
import logging
import sys
import uuid
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SAMPLE_ORDER = {
    'orderId': 'O1',
    'productId': 'P1',
    'quantity': 2,
    'totalPrice': 19.5,
    'customerName': 'Cliente Demo',
    'createdAt': '2025-01-01T10:00:00Z',
}


class DryRunClient:
    """Stands in for a boto3 client and logs the request instead of sending it."""

    def __init__(self, service):
        self.service = service

    def publish(self, **kwargs):
        logger.info(f"[DRY RUN] {self.service}.publish {kwargs}")
        return {'MessageId': f"dry-run-{uuid.uuid4()}"}

    def send_email(self, **kwargs):
        logger.info(f"[DRY RUN] {self.service}.send_email {kwargs}")
        return {'MessageId': f"dry-run-{uuid.uuid4()}"}


def build_event(bodies):
    return {
        'Records': [
            {
                'messageId': f"local-{index}",
                'eventSource': 'aws:sqs',
                'body': body,
            }
            for index, body in enumerate(bodies, start=1)
        ]
    }


def read_bodies(paths):
    if not paths:
        return [json.dumps(SAMPLE_ORDER)]
    return [Path(path).read_text(encoding='utf-8') for path in paths]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the order notifier handler against local order files.")
    parser.add_argument('orders', nargs='*', help="JSON order files. Default: a built-in sample order.")
    parser.add_argument('--env-file', default='.env', help="dotenv file to load before the handler is imported.")
    parser.add_argument('--dry-run', action='store_true', help="Log SNS/SES requests instead of sending them.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    load_dotenv(args.env_file)
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s - %(message)s')

    # Imported late so the .env values are visible when clients are built
    from order_notifier import app
    from order_notifier.dispatcher import NotificationDispatcher

    if args.dry_run:
        app.dispatcher = NotificationDispatcher(DryRunClient('sns'), DryRunClient('ses'), app.settings)

    event = build_event(read_bodies(args.orders))
    response = app.lambda_handler(event, None)
    if response is not None:
        print(json.dumps(response, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
