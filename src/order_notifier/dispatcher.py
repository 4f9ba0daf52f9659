import html
import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from botocore.exceptions import BotoCoreError, ClientError

from order_notifier.errors import ConfigurationError, TransportFault

logger = logging.getLogger(__name__)

TOPIC_MESSAGE_TEMPLATE = "Pedido recibido: ID={order_id}, Producto={product_id}, Cantidad={quantity}, Total={total}"

EMAIL_SUBJECT_TEMPLATE = "Nuevo Pedido Recibido: {order_id}"

EMAIL_HTML_TEMPLATE = (
    "<html>"
    "<body>"
    "<h1>Nuevo Pedido</h1>"
    "<p><strong>Order ID:</strong> {order_id}</p>"
    "<p><strong>Producto:</strong> {product_id}</p>"
    "<p><strong>Cantidad:</strong> {quantity}</p>"
    "<p><strong>Total:</strong> {total}</p>"
    "<p><strong>Cliente:</strong> {customer_name}</p>"
    "<p><strong>Fecha de Creación:</strong> {created_at}</p>"
    "</body>"
    "</html>"
)

_CENTS = Decimal('0.01')


def format_total(value):
    """Render a monetary amount with two decimals, rounding half up."""
    if value is None:
        return 'None'
    amount = Decimal(str(value))
    # Room for every integer digit plus the cents
    with localcontext() as ctx:
        ctx.prec = max(28, amount.adjusted() + 3)
        return str(amount.quantize(_CENTS, rounding=ROUND_HALF_UP))


def build_topic_message(order):
    return TOPIC_MESSAGE_TEMPLATE.format(
        order_id=order.order_id,
        product_id=order.product_id,
        quantity=order.quantity,
        total=format_total(order.total_price),
    )


def build_email_subject(order):
    return EMAIL_SUBJECT_TEMPLATE.format(order_id=order.order_id)


def build_email_html(order):
    values = {
        'order_id': order.order_id,
        'product_id': order.product_id,
        'quantity': order.quantity,
        'total': format_total(order.total_price),
        'customer_name': order.customer_name,
        'created_at': order.created_at,
    }
    # Values only land in element text, so quotes stay as they are
    escaped = {key: html.escape(str(value), quote=False) for key, value in values.items()}
    return EMAIL_HTML_TEMPLATE.format(**escaped)


class NotificationDispatcher:
    """
    Sends the SNS topic notification and the SES email for one order.

    The boto3 clients are shared and only read from; one dispatcher lives
    for the whole Lambda container.
    """

    def __init__(self, sns_client, ses_client, settings):
        self.sns = sns_client
        self.ses = ses_client
        self.settings = settings

    def dispatch(self, order):
        """Publish to the topic, then send the email. No rollback."""
        self.publish_topic_notification(order)
        self.send_email_notification(order)

    def publish_topic_notification(self, order):
        try:
            topic_arn = self._require_topic_arn()
        except ConfigurationError as e:
            logger.error(f"Skipping topic notification for order {order.order_id}: {e}")
            return None

        message = build_topic_message(order)
        try:
            response = self.sns.publish(TopicArn=topic_arn, Message=message)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"SNS publish failed for order {order.order_id}: {e}")
            raise TransportFault('Publish', e) from e

        message_id = response.get('MessageId')
        logger.info(f"Topic notification sent for order {order.order_id}. MessageId: {message_id}")
        return message_id

    def send_email_notification(self, order):
        # Sender and recipient are not validated; SES rejects bad addresses.
        request = {
            'Source': self.settings.email_sender,
            'Destination': {'ToAddresses': [self.settings.email_recipient]},
            'Message': {
                'Subject': {'Data': build_email_subject(order)},
                'Body': {'Html': {'Data': build_email_html(order)}},
            },
        }
        try:
            response = self.ses.send_email(**request)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"SES send_email failed for order {order.order_id}: {e}")
            raise TransportFault('SendEmail', e) from e

        message_id = response.get('MessageId')
        logger.info(f"Email sent for order {order.order_id}. MessageId: {message_id}")
        return message_id

    def _require_topic_arn(self):
        if not self.settings.sns_topic_arn:
            raise ConfigurationError("SNS_TOPIC_ARN is not configured")
        return self.settings.sns_topic_arn
