"""
Module: outcome.py
Description: Classified results of single HTTP delivery attempts.

Every attempt ends in exactly one AttemptOutcome variant. The retry loop
only looks at `retryable`; reporting uses `error_kind` and `describe()`.
"""

from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    AUTHENTICATION_REJECTED = "authentication_rejected"
    SESSION_NOT_FOUND = "session_not_found"
    REQUEST_REJECTED = "request_rejected"
    RATE_LIMITED = "rate_limited"
    TRANSPORT_ERROR = "transport_error"
    UNEXPECTED_STATUS = "unexpected_status"


class AttemptOutcome(BaseModel):
    """
    Base class for attempt outcomes.

    Attributes:
        status_code: HTTP status, None when no response was received
        detail: Diagnostic text captured from the response body, if readable
    """

    model_config = ConfigDict(frozen=True)

    retryable: ClassVar[bool] = False

    status_code: Optional[int] = None
    detail: Optional[str] = None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return None

    def describe(self) -> str:
        if self.status_code is None:
            return "no response"
        return f"HTTP {self.status_code}"


class Delivered(AttemptOutcome):
    """2xx response: the appliance accepted the event."""

    status_code: int

    def describe(self) -> str:
        return f"delivered (HTTP {self.status_code})"


class FatalRejected(AttemptOutcome):
    """400, 401 or 404: retrying cannot change the answer."""

    status_code: int
    detail: str

    @property
    def error_kind(self) -> ErrorKind:
        if self.status_code == 401:
            return ErrorKind.AUTHENTICATION_REJECTED
        if self.status_code == 404:
            return ErrorKind.SESSION_NOT_FOUND
        return ErrorKind.REQUEST_REJECTED

    def describe(self) -> str:
        text = f"{self.detail} (HTTP {self.status_code})"
        if self.status_code == 400:
            text += "; check the API version and session identifier"
        return text


class Throttled(AttemptOutcome):
    """429: the appliance asked us to slow down."""

    retryable: ClassVar[bool] = True

    status_code: int = 429

    @property
    def error_kind(self) -> ErrorKind:
        return ErrorKind.RATE_LIMITED

    def describe(self) -> str:
        text = f"rate limited (HTTP {self.status_code})"
        if self.detail:
            text += f": {self.detail}"
        return text


class TransientFailure(AttemptOutcome):
    """
    Transport error or unexpected status; a later attempt may succeed.

    Attributes:
        cause: Short description ('HTTP 503', 'timeout: ...')
    """

    retryable: ClassVar[bool] = True

    cause: str

    @property
    def error_kind(self) -> ErrorKind:
        if self.status_code is None:
            return ErrorKind.TRANSPORT_ERROR
        return ErrorKind.UNEXPECTED_STATUS

    def describe(self) -> str:
        if self.detail:
            return f"{self.cause}: {self.detail}"
        return self.cause


AnyOutcome = Union[Delivered, FatalRejected, Throttled, TransientFailure]
