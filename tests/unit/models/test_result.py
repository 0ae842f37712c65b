"""
Module: test_result.py
Description: Unit tests for DeliveryResult and attempt outcome models.
"""

import pytest

from custom_events import errors
from custom_events.models.outcome import (
    AttemptOutcome,
    Delivered,
    ErrorKind,
    FatalRejected,
    Throttled,
    TransientFailure,
)
from custom_events.models.result import DeliveryResult, DeliveryStatus


class TestDeliveryResult:
    """Test cases for DeliveryResult properties."""

    def test_success_has_no_reason(self):
        result = DeliveryResult(
            status=DeliveryStatus.DELIVERED,
            attempts=2,
            last_outcome=Delivered(status_code=200),
        )

        assert result.succeeded
        assert result.reason is None
        assert result.error_kind is None
        result.raise_for_failure()

    def test_rejected_reason(self):
        result = DeliveryResult(
            status=DeliveryStatus.REJECTED,
            attempts=1,
            last_outcome=FatalRejected(status_code=400, detail="Invalid version"),
        )

        assert result.reason == (
            "Invalid version (HTTP 400); check the API version and session identifier"
        )

    def test_single_attempt_wording(self):
        result = DeliveryResult(
            status=DeliveryStatus.EXHAUSTED,
            attempts=1,
            last_outcome=TransientFailure(cause="timeout: read timed out"),
        )

        assert result.reason == "gave up after 1 attempt: timeout: read timed out"

    def test_cancelled_without_attempts(self):
        result = DeliveryResult(status=DeliveryStatus.CANCELLED, attempts=0)

        assert result.reason == "cancelled after 0 attempts"
        with pytest.raises(errors.DeliveryCancelled):
            result.raise_for_failure()

    def test_outcome_type_preserved(self):
        """Test the concrete outcome variant survives model validation."""
        result = DeliveryResult(status=DeliveryStatus.EXHAUSTED, attempts=3, last_outcome=Throttled())

        assert isinstance(result.last_outcome, Throttled)

    @pytest.mark.parametrize("outcome,exception", [
        (FatalRejected(status_code=401, detail="authentication failed"), errors.AuthenticationRejected),
        (FatalRejected(status_code=404, detail="session not found"), errors.SessionNotFound),
        (FatalRejected(status_code=400, detail="bad"), errors.RequestRejected),
        (Throttled(), errors.RateLimited),
        (TransientFailure(cause="connection error: refused"), errors.TransportError),
        (TransientFailure(cause="HTTP 502", status_code=502), errors.UnexpectedStatus),
    ])
    def test_raise_for_failure_maps_error_kind(self, outcome, exception):
        status = DeliveryStatus.EXHAUSTED if outcome.retryable else DeliveryStatus.REJECTED
        result = DeliveryResult(status=status, attempts=1, last_outcome=outcome)

        with pytest.raises(exception) as exc_info:
            result.raise_for_failure()

        assert exc_info.value.status_code == outcome.status_code
        assert exc_info.value.get_exit_code() == 1


class TestOutcomes:
    """Test cases for outcome classification properties."""

    def test_retryable_flags(self):
        assert Delivered(status_code=200).retryable is False
        assert FatalRejected(status_code=401, detail="x").retryable is False
        assert Throttled().retryable is True
        assert TransientFailure(cause="HTTP 500", status_code=500).retryable is True

    def test_transport_vs_status_kind(self):
        assert TransientFailure(cause="timeout").error_kind is ErrorKind.TRANSPORT_ERROR
        assert TransientFailure(cause="HTTP 500", status_code=500).error_kind is ErrorKind.UNEXPECTED_STATUS

    def test_base_outcome_description(self):
        assert AttemptOutcome().describe() == "no response"
        assert AttemptOutcome(status_code=418).describe() == "HTTP 418"
        assert AttemptOutcome().error_kind is None

    def test_invalid_configuration_exit_code(self):
        assert errors.InvalidConfiguration("bad").get_exit_code() == 2
        assert isinstance(errors.InvalidConfiguration("bad"), ValueError)
