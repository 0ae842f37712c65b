"""
Module: sender.py
Description: Delivers one custom event to the appliance with retries.

EventSender runs the bounded retry loop: build the URL, encode the body
once, POST it until an attempt is delivered, rejected, or the retry
budget is spent, and hand back a DeliveryResult. HTTP and transport
failures never escape as exceptions; only InvalidConfiguration does,
and only before the first request.
"""

import threading
import time
from typing import Any, Callable, Dict, Optional

import httpx
from tenacity import RetryCallState

from custom_events.delivery.classifier import classify_response, classify_transport_error
from custom_events.delivery.encoder import build_headers, encode_event_body
from custom_events.delivery.retry import build_retrying
from custom_events.models.outcome import AttemptOutcome, Delivered
from custom_events.models.request import DeliveryRequest, create_delivery_request
from custom_events.models.result import DeliveryResult, DeliveryStatus
from custom_events.utils.logger import get_logger


class _Cancelled(Exception):
    """Raised from the backoff wait when the cancel token is set."""


class EventSender:
    """
    HTTP client for posting custom events to an appliance.

    Collaborators are injected so the retry loop can run without real I/O:
    the httpx client (transport), the sleep function used for backoff, the
    structlog logger (log sink), and an optional cancel token.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        logger: Any = None,
        sleep: Optional[Callable[[float], None]] = None,
        cancel: Optional[threading.Event] = None,
    ):
        """
        Initialize the sender.

        Args:
            client: httpx client to send with; one is created (and owned) if omitted
            logger: structlog logger receiving diagnostics
            sleep: Backoff sleep function, time.sleep if omitted
            cancel: Event that aborts pending backoff waits and further attempts
        """
        self._client = client
        self._owns_client = client is None
        self.logger = logger if logger is not None else get_logger(__name__)
        self._sleep = sleep if sleep is not None else time.sleep
        self._cancel = cancel

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client()
        return self._client

    def close(self) -> None:
        """Close the underlying client if this sender created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "EventSender":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _wait(self, seconds: float) -> None:
        if self._cancel is None:
            self._sleep(seconds)
        elif self._cancel.wait(seconds):
            raise _Cancelled()

    def _post(self, url: str, body: bytes, headers: Dict[str, str], timeout: float) -> AttemptOutcome:
        try:
            with self.client.stream(
                "POST", url, content=body, headers=headers, timeout=timeout
            ) as response:
                try:
                    response.read()
                except httpx.DecodingError as e:
                    # Status is known; the body is left unread and carries no detail
                    self.logger.debug(
                        "Response body could not be decoded",
                        status_code=response.status_code,
                        error=str(e),
                    )
                return classify_response(response)
        except (httpx.TransportError, httpx.DecodingError) as e:
            return classify_transport_error(e)

    def send(self, request: DeliveryRequest) -> DeliveryResult:
        """
        Deliver the request's message, retrying transient failures.

        Args:
            request: Validated delivery parameters

        Returns:
            DeliveryResult with status DELIVERED, REJECTED, EXHAUSTED or CANCELLED

        Raises:
            InvalidConfiguration: If the target URL cannot be built
        """
        url = request.event_url
        body = encode_event_body(request.message)
        headers = build_headers(request.credential)
        max_attempts = request.max_retries + 1

        log = self.logger.bind(session_id=request.session_id, url=url)
        state = {"attempts": 0, "last": None}

        if self._cancel is not None and self._cancel.is_set():
            log.warning("Event delivery cancelled before first attempt")
            return DeliveryResult(status=DeliveryStatus.CANCELLED, attempts=0)

        def attempt() -> AttemptOutcome:
            state["attempts"] += 1
            log.debug(
                "Attempting event delivery",
                attempt=state["attempts"],
                max_attempts=max_attempts,
            )

            outcome = self._post(url, body, headers, request.timeout)
            state["last"] = outcome

            if isinstance(outcome, Delivered):
                log.info(
                    "Event delivered successfully",
                    attempt=state["attempts"],
                    status_code=outcome.status_code,
                )
            else:
                log.warning(
                    "Event delivery attempt failed",
                    attempt=state["attempts"],
                    status_code=outcome.status_code,
                    reason=outcome.describe(),
                    retryable=outcome.retryable,
                )
            return outcome

        def before_sleep(retry_state: RetryCallState) -> None:
            log.info(
                "Retrying event delivery",
                attempt=retry_state.attempt_number,
                wait_seconds=retry_state.next_action.sleep,
            )

        retrying = build_retrying(
            request.max_retries,
            sleep=self._wait,
            before_sleep=before_sleep,
            cancel=self._cancel,
        )

        try:
            outcome = retrying(attempt)
        except _Cancelled:
            outcome = state["last"]
            cancelled = True
        else:
            cancelled = (
                self._cancel is not None
                and self._cancel.is_set()
                and outcome.retryable
            )

        result = self._result(outcome, state["attempts"], cancelled)

        if result.status is DeliveryStatus.REJECTED:
            log.error("Event delivery rejected", attempts=result.attempts, reason=result.reason)
        elif not result.succeeded:
            log.error(
                "Event delivery failed",
                status=result.status.value,
                attempts=result.attempts,
                reason=result.reason,
            )

        return result

    @staticmethod
    def _result(outcome: Optional[AttemptOutcome], attempts: int, cancelled: bool) -> DeliveryResult:
        if cancelled:
            status = DeliveryStatus.CANCELLED
        elif isinstance(outcome, Delivered):
            status = DeliveryStatus.DELIVERED
        elif outcome.retryable:
            status = DeliveryStatus.EXHAUSTED
        else:
            status = DeliveryStatus.REJECTED

        return DeliveryResult(status=status, attempts=attempts, last_outcome=outcome)


def send_event(
    endpoint_base: str,
    credential: str,
    session_id: str,
    message: str,
    api_version: Optional[str] = None,
    max_retries: Optional[int] = None,
    timeout: Optional[float] = None,
    logger: Any = None,
) -> DeliveryResult:
    """
    Validate parameters and deliver one event.

    Convenience wrapper for embedding code that has no sender of its own.

    Raises:
        InvalidConfiguration: If any parameter is invalid (no request is made)
    """
    request = create_delivery_request(
        endpoint_base=endpoint_base,
        credential=credential,
        session_id=session_id,
        message=message,
        api_version=api_version,
        max_retries=max_retries,
        timeout=timeout,
    )
    with EventSender(logger=logger) as sender:
        return sender.send(request)
