"""Exceptions raised by the reminder engine."""

from urllib.parse import urlparse


class ReminderEngineError(Exception):
    """Base class for reminder engine errors."""

    pass


class ConfigurationError(ReminderEngineError):
    """Raised when the push transport is missing credentials.

    Fatal for the whole pass: nothing is selected, sent or committed.
    """

    pass


class TransientStoreError(ReminderEngineError):
    """Raised when a read or write against the item or subscription store fails.

    Never fatal to a pass; the affected work is retried on the next pass.
    """

    def __init__(self, operation: str, message: str) -> None:
        """Initialise the error.

        :param operation: Name of the store operation that failed.
        :param message: Error description.
        """
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class DeliveryError(ReminderEngineError):
    """Raised when a single push endpoint rejects or cannot receive a payload."""

    def __init__(self, endpoint: str, message: str, status_code: int | None = None) -> None:
        """Initialise the error.

        :param endpoint: The subscription endpoint URL.
        :param message: Error description.
        :param status_code: HTTP status code from the push service, if any.
        """
        self.endpoint_host = urlparse(endpoint).netloc or endpoint
        super().__init__(f"{self.endpoint_host}: {message}")
        self.endpoint = endpoint
        self.status_code = status_code


class ExpiredSubscriptionError(DeliveryError):
    """The push service reports the subscription as gone (HTTP 404/410)."""

    pass


class MalformedSubscriptionError(DeliveryError):
    """The subscription keys cannot be used to encrypt a payload."""

    pass


class PushNetworkError(DeliveryError):
    """The push service could not be reached or returned another error."""

    pass
