"""
Module: reporter.py
Description: Translates delivery results into caller-facing markers.

Calling scripts read the first line of output: SUCCESS, "FAILED: reason"
or "ERROR: reason" (malformed input), and the process exit code. The
reporter never raises; if the marker cannot be written the exit code
still carries the outcome.
"""

import sys
from typing import Optional, TextIO

from custom_events.constants import (
    EXIT_CODE_FAILURE,
    EXIT_CODE_INVALID_INPUT,
    EXIT_CODE_SUCCESS,
    MARKER_ERROR,
    MARKER_FAILED,
    MARKER_SUCCESS,
)
from custom_events.errors import EventDeliveryError
from custom_events.models.result import DeliveryResult


def render_marker(result: DeliveryResult) -> str:
    if result.succeeded:
        return MARKER_SUCCESS
    return f"{MARKER_FAILED}: {result.reason}"


def render_error_marker(error: Exception) -> str:
    return f"{MARKER_ERROR}: {error}"


def exit_code_for(result: DeliveryResult) -> int:
    return EXIT_CODE_SUCCESS if result.succeeded else EXIT_CODE_FAILURE


def _emit(line: str, stream: Optional[TextIO]) -> None:
    stream = stream if stream is not None else sys.stdout
    try:
        stream.write(line + "\n")
        stream.flush()
    except (OSError, ValueError):
        pass


def report(result: DeliveryResult, stream: Optional[TextIO] = None) -> int:
    """
    Write the result marker and return the process exit code.

    Args:
        result: Terminal delivery result
        stream: Output stream, stdout when omitted

    Returns:
        0 on success, 1 on any delivery failure
    """
    _emit(render_marker(result), stream)
    return exit_code_for(result)


def report_error(error: Exception, stream: Optional[TextIO] = None) -> int:
    """
    Write an ERROR marker for input that never reached delivery.

    Returns:
        The error's own exit code, 2 for errors outside the taxonomy
    """
    _emit(render_error_marker(error), stream)
    if isinstance(error, EventDeliveryError):
        return error.get_exit_code()
    return EXIT_CODE_INVALID_INPUT


def report_unexpected(error: Exception, stream: Optional[TextIO] = None) -> int:
    """Write a FAILED marker for an error outside the delivery taxonomy."""
    _emit(f"{MARKER_FAILED}: unexpected error: {type(error).__name__}: {error}", stream)
    return EXIT_CODE_FAILURE
