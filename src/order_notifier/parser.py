import json
import logging
from decimal import Decimal

from order_notifier.errors import DecodeError
from order_notifier.models import Order

logger = logging.getLogger(__name__)


def decode_order(raw_text):
    """
    Decode one SQS message body into an Order.

    Raises DecodeError when the text is not a JSON encoded order.
    """
    try:
        if isinstance(raw_text, (bytes, bytearray)):
            raw_text = raw_text.decode('utf-8')
        data = json.loads(raw_text, parse_float=Decimal)
    except (TypeError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Invalid order JSON: {e}") from e

    return Order.from_dict(data)


def parse_order(raw_text):
    """
    Best-effort variant of decode_order: logs the failure and returns None.
    """
    try:
        return decode_order(raw_text)
    except DecodeError as e:
        logger.error(f"Failed to parse order: {e}")
        return None
