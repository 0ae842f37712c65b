"""
Module: constants.py
Description: Wire format and exit code constants shared across the client.
"""

# Appended to the appliance base URL
EVENTS_PATH_TEMPLATE = "/publicApi/{api_version}/user-sessions/{session_id}/events"

MAX_MESSAGE_LENGTH = 4096
MAX_RETRIES_LIMIT = 5
MIN_TIMEOUT_SECONDS = 5
MAX_TIMEOUT_SECONDS = 60

# Result markers read by calling scripts
MARKER_SUCCESS = "SUCCESS"
MARKER_FAILED = "FAILED"
MARKER_ERROR = "ERROR"

EXIT_CODE_SUCCESS = 0
EXIT_CODE_FAILURE = 1
EXIT_CODE_INVALID_INPUT = 2
