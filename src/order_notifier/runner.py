import logging
from dataclasses import dataclass, field
from typing import Optional

from order_notifier.errors import TransportFault
from order_notifier.parser import parse_order

logger = logging.getLogger(__name__)

PROCESSED = 'processed'
DECODE_FAILED = 'decode_failed'
FAILED = 'failed'
NOT_PROCESSED = 'not_processed'


@dataclass
class ItemResult:
    index: int
    status: str
    message_id: Optional[str] = None
    order_id: Optional[str] = None
    error: Optional[str] = None
    fault: Optional[TransportFault] = field(default=None, repr=False, compare=False)

    @property
    def succeeded(self):
        return self.status == PROCESSED

    @property
    def retryable(self):
        return self.status in (FAILED, NOT_PROCESSED)


def process_batch(bodies, dispatcher, *, message_ids=None, continue_on_error=False):
    """
    Parse and dispatch each message body in order, one at a time.

    Returns one ItemResult per body. Malformed bodies are skipped. A
    TransportFault marks the item as failed; unless continue_on_error is
    set, the remaining items are left unprocessed.
    """
    bodies = list(bodies)
    message_ids = list(message_ids) if message_ids is not None else [None] * len(bodies)
    if len(message_ids) != len(bodies):
        raise ValueError(f"Got {len(message_ids)} message ids for {len(bodies)} bodies")
    results = []

    for index, (body, message_id) in enumerate(zip(bodies, message_ids)):
        logger.info(f"Processing order message {message_id or index}: {body}")

        order = parse_order(body)
        if order is None:
            logger.warning(f"Skipping message {message_id or index}: body is not a valid order")
            results.append(ItemResult(index, DECODE_FAILED, message_id=message_id))
            continue

        try:
            dispatcher.dispatch(order)
        except TransportFault as e:
            results.append(
                ItemResult(index, FAILED, message_id=message_id, order_id=order.order_id, error=str(e), fault=e)
            )
            if not continue_on_error:
                logger.error(f"Aborting batch at message {message_id or index}: {e}")
                break
            continue

        results.append(ItemResult(index, PROCESSED, message_id=message_id, order_id=order.order_id))

    for index in range(len(results), len(bodies)):
        results.append(ItemResult(index, NOT_PROCESSED, message_id=message_ids[index]))

    return results


def process(bodies, dispatcher):
    """
    Run the batch and let the first TransportFault propagate.

    Items after the failing one are never processed.
    """
    for body in bodies:
        order = parse_order(body)
        if order is None:
            continue
        dispatcher.dispatch(order)
