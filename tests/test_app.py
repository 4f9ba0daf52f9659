import unittest
from unittest.mock import MagicMock, patch
import dataclasses
import json
import os

from botocore.exceptions import ClientError

# Mock Environment Variables BEFORE importing the app
os.environ['SNS_TOPIC_ARN'] = 'arn:aws:sns:sa-east-1:123456789012:orders'
os.environ['EMAIL_SENDER'] = 'pedidos@example.com'
os.environ['EMAIL_RECIPIENT'] = 'ventas@example.com'
os.environ['AWS_REGION'] = 'sa-east-1'

from order_notifier import app
from order_notifier.errors import TransportFault


def sqs_event(*bodies):
    return {
        'Records': [
            {'messageId': f'msg-{index}', 'body': body}
            for index, body in enumerate(bodies, start=1)
        ]
    }


def order_body(order_id):
    return json.dumps({
        'orderId': order_id,
        'productId': 'prod-101',
        'quantity': 2,
        'totalPrice': 19.5,
        'customerName': 'Ana',
        'createdAt': '2025-01-01T10:00:00Z',
    })


class TestLambdaHandler(unittest.TestCase):

    def setUp(self):
        self.sns = MagicMock()
        self.ses = MagicMock()
        self.sns.publish.return_value = {'MessageId': 'sns-1'}
        self.ses.send_email.return_value = {'MessageId': 'ses-1'}
        patcher_sns = patch.object(app.dispatcher, 'sns', self.sns)
        patcher_ses = patch.object(app.dispatcher, 'ses', self.ses)
        patcher_sns.start()
        patcher_ses.start()
        self.addCleanup(patcher_sns.stop)
        self.addCleanup(patcher_ses.stop)

    def test_settings_are_read_from_environment(self):
        self.assertEqual(app.settings.sns_topic_arn, 'arn:aws:sns:sa-east-1:123456789012:orders')
        self.assertEqual(app.settings.email_recipient, 'ventas@example.com')
        self.assertEqual(app.settings.region, 'sa-east-1')

    def test_valid_batch_sends_both_notifications(self):
        """
        Each order produces one SNS publish and one SES email.
        """
        result = app.lambda_handler(sqs_event(order_body('order-001'), order_body('order-002')), None)

        self.assertIsNone(result)
        self.assertEqual(self.sns.publish.call_count, 2)
        self.assertEqual(self.ses.send_email.call_count, 2)
        self.sns.publish.assert_any_call(
            TopicArn='arn:aws:sns:sa-east-1:123456789012:orders',
            Message='Pedido recibido: ID=order-001, Producto=prod-101, Cantidad=2, Total=19.50',
        )

    def test_malformed_message_does_not_fail_invocation(self):
        result = app.lambda_handler(sqs_event('not-json', order_body('order-002')), None)

        self.assertIsNone(result)
        self.sns.publish.assert_called_once()
        self.ses.send_email.assert_called_once()

    def test_transport_fault_fails_invocation(self):
        """
        A failed send is re-raised so SQS redelivers the batch; later
        messages are not processed.
        """
        self.sns.publish.side_effect = ClientError(
            {'Error': {'Code': 'Throttling', 'Message': 'Rate exceeded'}}, 'Publish'
        )

        with self.assertRaises(TransportFault):
            app.lambda_handler(sqs_event(order_body('order-001'), order_body('order-002')), None)

        self.sns.publish.assert_called_once()
        self.ses.send_email.assert_not_called()

    def test_partial_batch_response(self):
        self.ses.send_email.side_effect = [
            {'MessageId': 'ses-1'},
            ClientError({'Error': {'Code': 'MessageRejected', 'Message': 'Email address is not verified'}}, 'SendEmail'),
        ]
        settings = dataclasses.replace(app.settings, report_batch_item_failures=True)

        with patch.object(app, 'settings', settings):
            result = app.lambda_handler(
                sqs_event(order_body('order-001'), order_body('order-002'), order_body('order-003')),
                None,
            )

        self.assertEqual(result, {
            'batchItemFailures': [{'itemIdentifier': 'msg-2'}, {'itemIdentifier': 'msg-3'}],
        })

    def test_missing_topic_still_sends_email(self):
        settings = dataclasses.replace(app.settings, sns_topic_arn='')

        with patch.object(app.dispatcher, 'settings', settings):
            app.lambda_handler(sqs_event(order_body('order-001')), None)

        self.sns.publish.assert_not_called()
        self.ses.send_email.assert_called_once()

    def test_empty_event(self):
        self.assertIsNone(app.lambda_handler({'Records': []}, None))


if __name__ == '__main__':
    unittest.main()
