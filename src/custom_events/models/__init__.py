"""
Module: models
Description: Package initialization for Pydantic data models.

This package contains all data models used by the custom events client:
- DeliveryRequest: Validated delivery parameters
- AttemptOutcome variants: Classified result of one HTTP attempt
- DeliveryResult: Terminal result of the retry loop

All models are exported here for convenient importing.
"""

from .outcome import (
    AttemptOutcome,
    Delivered,
    ErrorKind,
    FatalRejected,
    Throttled,
    TransientFailure,
)
from .request import DeliveryRequest, create_delivery_request
from .result import DeliveryResult, DeliveryStatus

__all__ = [
    "AttemptOutcome",
    "Delivered",
    "DeliveryRequest",
    "DeliveryResult",
    "DeliveryStatus",
    "ErrorKind",
    "FatalRejected",
    "Throttled",
    "TransientFailure",
    "create_delivery_request",
]
