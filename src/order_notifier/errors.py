from botocore.exceptions import ClientError


class NotifierError(Exception):
    """Base class for errors raised by the order notifier."""


class DecodeError(NotifierError, ValueError):
    """Raw message text does not decode into an Order."""


class ConfigurationError(NotifierError):
    """A required setting is missing or malformed."""


class TransportFault(NotifierError):
    """
    An SNS or SES call failed.

    Wraps the botocore exception so callers only need to catch one type.
    """

    def __init__(self, operation, cause):
        self.operation = operation
        self.cause = cause
        self.error_code = None
        if isinstance(cause, ClientError):
            self.error_code = cause.response.get('Error', {}).get('Code')
        super().__init__(f"{operation} failed: {cause}")
