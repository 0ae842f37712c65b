"""
Module: result.py
Description: Terminal result of a delivery sequence.
"""

from enum import Enum
from typing import Dict, Optional, Type

from pydantic import BaseModel, ConfigDict, Field

from custom_events import errors
from custom_events.models.outcome import AnyOutcome, ErrorKind

_ERRORS_BY_KIND: Dict[ErrorKind, Type[errors.EventDeliveryError]] = {
    ErrorKind.AUTHENTICATION_REJECTED: errors.AuthenticationRejected,
    ErrorKind.SESSION_NOT_FOUND: errors.SessionNotFound,
    ErrorKind.REQUEST_REJECTED: errors.RequestRejected,
    ErrorKind.RATE_LIMITED: errors.RateLimited,
    ErrorKind.TRANSPORT_ERROR: errors.TransportError,
    ErrorKind.UNEXPECTED_STATUS: errors.UnexpectedStatus,
}


class DeliveryStatus(str, Enum):
    """How the delivery sequence ended."""

    DELIVERED = "delivered"
    REJECTED = "rejected"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


class DeliveryResult(BaseModel):
    """
    Outcome of EventSender.send(), created once the retry loop has ended.

    Attributes:
        status: Terminal state of the sequence
        attempts: Number of HTTP requests made
        last_outcome: Classification of the final attempt (None if cancelled
            before the first attempt)
    """

    model_config = ConfigDict(frozen=True)

    status: DeliveryStatus
    attempts: int = Field(ge=0)
    last_outcome: Optional[AnyOutcome] = None

    @property
    def succeeded(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        if self.succeeded or self.last_outcome is None:
            return None
        return self.last_outcome.error_kind

    @property
    def reason(self) -> Optional[str]:
        """Human-readable failure reason, None on success."""
        if self.succeeded:
            return None

        last = self.last_outcome.describe() if self.last_outcome is not None else None
        plural = "s" if self.attempts != 1 else ""

        if self.status is DeliveryStatus.CANCELLED:
            text = f"cancelled after {self.attempts} attempt{plural}"
            return f"{text}; last error: {last}" if last else text
        if self.status is DeliveryStatus.EXHAUSTED:
            return f"gave up after {self.attempts} attempt{plural}: {last}"
        return last

    def raise_for_failure(self) -> None:
        """
        Raise the exception matching the failure, do nothing on success.

        Raises:
            EventDeliveryError: Subclass selected by the last outcome's error kind
        """
        if self.succeeded:
            return

        status_code = self.last_outcome.status_code if self.last_outcome is not None else None
        if self.status is DeliveryStatus.CANCELLED:
            raise errors.DeliveryCancelled(self.reason, status_code=status_code)

        raise _ERRORS_BY_KIND[self.error_kind](self.reason, status_code=status_code)
