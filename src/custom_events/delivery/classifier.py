"""
Module: classifier.py
Description: Maps HTTP responses and transport errors to attempt outcomes.

Classification never raises: an unreadable response body only means the
outcome carries no diagnostic detail.
"""

from typing import Optional

import httpx

from custom_events.models.outcome import (
    AttemptOutcome,
    Delivered,
    FatalRejected,
    Throttled,
    TransientFailure,
)
from custom_events.utils.logger import get_logger

logger = get_logger(__name__)

MAX_DETAIL_LENGTH = 500

# Body fields checked, in order, for a human readable error message
DETAIL_FIELDS = ("message", "detail", "error", "title")


def _truncate(text: str) -> str:
    text = text.strip()
    if len(text) > MAX_DETAIL_LENGTH:
        return text[:MAX_DETAIL_LENGTH] + "..."
    return text


def read_error_detail(response: httpx.Response) -> Optional[str]:
    """
    Best-effort extraction of an error message from a response body.

    Prefers a message field of a JSON object body and falls back to the raw
    text. Returns None when the body is empty or cannot be read.
    """
    try:
        text = response.text
    except (httpx.StreamError, UnicodeError, LookupError) as e:
        logger.debug("Response body unreadable", status_code=response.status_code, error=str(e))
        return None

    if not text or not text.strip():
        return None

    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        for field in DETAIL_FIELDS:
            value = data.get(field)
            if isinstance(value, str) and value.strip():
                return _truncate(value)

    return _truncate(text)


def classify_response(response: httpx.Response) -> AttemptOutcome:
    """
    Classify a completed HTTP exchange.

    Args:
        response: Response returned by the appliance

    Returns:
        Delivered for 2xx, FatalRejected for 400/401/404, Throttled for 429,
        TransientFailure for every other status
    """
    status = response.status_code

    if 200 <= status < 300:
        return Delivered(status_code=status)

    detail = read_error_detail(response)

    if status == 401:
        return FatalRejected(status_code=401, detail="authentication failed")
    if status == 404:
        return FatalRejected(status_code=404, detail="session not found")
    if status == 400:
        return FatalRejected(
            status_code=400,
            detail=detail or response.reason_phrase or "bad request",
        )
    if status == 429:
        return Throttled(status_code=429, detail=detail)

    return TransientFailure(cause=f"HTTP {status}", status_code=status, detail=detail)


def classify_transport_error(error: httpx.RequestError) -> TransientFailure:
    """
    Classify a request that never produced a usable response.

    Timeouts, refused connections, DNS failures and undecodable response
    bodies are all transient.
    """
    message = str(error) or type(error).__name__

    if isinstance(error, httpx.TimeoutException):
        return TransientFailure(cause=f"timeout: {message}")
    if isinstance(error, httpx.NetworkError):
        return TransientFailure(cause=f"connection error: {message}")
    if isinstance(error, httpx.DecodingError):
        return TransientFailure(cause=f"response decoding error: {message}")
    return TransientFailure(cause=f"transport error: {message}")
