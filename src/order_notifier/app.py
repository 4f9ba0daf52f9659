import logging

import boto3

from order_notifier.config import load_settings
from order_notifier.dispatcher import NotificationDispatcher
from order_notifier.runner import FAILED, process_batch

settings = load_settings()

# Configure Logging
logger = logging.getLogger()
logger.setLevel(settings.log_level)

# Initialize AWS clients outside handler for connection reuse
sns = boto3.client('sns', region_name=settings.region)
ses = boto3.client('ses', region_name=settings.region)

dispatcher = NotificationDispatcher(sns, ses, settings)


def lambda_handler(event, context):
    """
    Triggered by SQS order messages.

    Publishes an SNS summary and sends an SES email for every order in the
    batch. Returns a partial batch response when REPORT_BATCH_ITEM_FAILURES
    is enabled; otherwise re-raises the first transport failure so SQS
    redelivers the batch.
    """
    records = event.get('Records', [])
    logger.info(f"Received {len(records)} order message(s)")

    results = process_batch(
        [record.get('body') for record in records],
        dispatcher,
        message_ids=[record.get('messageId') for record in records],
        continue_on_error=settings.continue_on_error,
    )

    processed = sum(1 for result in results if result.succeeded)
    failed = [result for result in results if result.status == FAILED]
    logger.info(
        f"Batch complete: {processed} processed, {len(failed)} failed, "
        f"{len(results) - processed - len(failed)} skipped or not processed"
    )

    if settings.report_batch_item_failures:
        return {
            'batchItemFailures': [
                {'itemIdentifier': result.message_id}
                for result in results
                if result.retryable and result.message_id
            ]
        }

    if failed:
        raise failed[0].fault

    return None
