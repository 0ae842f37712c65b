"""
Module: delivery/retry.py
Description: Retry policy for event delivery.

Exponential backoff without jitter: 1s, 2s, 4s, 8s, 16s before retries
1 to 5. Only retryable outcomes are retried; the final outcome is returned
instead of raising once the attempt budget is spent.
"""

import threading
import time
from typing import Callable, Optional

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_when_event_set,
    wait_exponential,
)

from custom_events.models.outcome import AttemptOutcome

BACKOFF_MULTIPLIER = 1
BACKOFF_BASE = 2


def _is_retryable(outcome: AttemptOutcome) -> bool:
    return outcome.retryable


def _return_last_outcome(retry_state: RetryCallState) -> AttemptOutcome:
    return retry_state.outcome.result()


def build_retrying(
    max_retries: int,
    sleep: Callable[[float], None] = time.sleep,
    before_sleep: Optional[Callable[[RetryCallState], None]] = None,
    cancel: Optional[threading.Event] = None,
) -> Retrying:
    """
    Build the tenacity controller for one delivery sequence.

    Args:
        max_retries: Retries allowed after the first attempt
        sleep: Sleep function used between attempts
        before_sleep: Callback invoked before each backoff wait
        cancel: Optional event; once set no further attempt is started

    Returns:
        Configured Retrying instance
    """
    stop = stop_after_attempt(max_retries + 1)
    if cancel is not None:
        stop = stop | stop_when_event_set(cancel)

    return Retrying(
        stop=stop,
        wait=wait_exponential(multiplier=BACKOFF_MULTIPLIER, exp_base=BACKOFF_BASE),
        retry=retry_if_result(_is_retryable),
        retry_error_callback=_return_last_outcome,
        before_sleep=before_sleep,
        sleep=sleep,
    )
