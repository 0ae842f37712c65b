"""
Module: errors.py
Description: Exception taxonomy for the custom events client.

Only InvalidConfiguration is raised during normal operation, before any
network call. Delivery failures travel as DeliveryResult values; the
remaining exceptions exist for callers that opt into raising through
DeliveryResult.raise_for_failure().
"""

from typing import Optional

from custom_events.constants import EXIT_CODE_FAILURE, EXIT_CODE_INVALID_INPUT


class EventDeliveryError(Exception):
    """
    Base exception for event delivery errors.

    Args:
        message (str): The error message.
        status_code (Optional[int]): HTTP status that caused the error, if any.
    """
    def __init__(self, message: str = "Event delivery failed", status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    def get_exit_code(self) -> int:
        """
        Get the exit code associated with this error.

        Returns:
            int: The exit code.
        """
        return EXIT_CODE_FAILURE


class InvalidConfiguration(EventDeliveryError, ValueError):
    """
    Malformed URL or out-of-range parameter, detected before any attempt.
    """
    def __init__(self, message: str = "Invalid delivery configuration"):
        super().__init__(message)

    def get_exit_code(self) -> int:
        return EXIT_CODE_INVALID_INPUT


class AuthenticationRejected(EventDeliveryError):
    """The appliance refused the API key (401)."""


class SessionNotFound(EventDeliveryError):
    """The session identifier is unknown to the appliance (404)."""


class RequestRejected(EventDeliveryError):
    """
    The appliance rejected the request as malformed (400).

    Usually a wrong API version or a malformed session identifier.
    """


class RateLimited(EventDeliveryError):
    """The appliance kept throttling (429) until the retry budget ran out."""


class TransportError(EventDeliveryError):
    """Timeout, refused connection or DNS failure on every attempt."""


class UnexpectedStatus(EventDeliveryError):
    """Any other non-2xx status persisted until the retry budget ran out."""


class DeliveryCancelled(EventDeliveryError):
    """Delivery stopped because the caller set the cancel token."""
