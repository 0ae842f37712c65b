#!/usr/bin/env python3
"""
Command-line entry point for sending custom events.

Two modes converge on the same delivery path:

Usage:
    custom-events send --url https://appliance.example.com --session-id abc-123 \\
        --message "Login page loaded" [--api-key KEY] [--max-retries 2] [--timeout 10]
    custom-events prompt < inputs.txt

In prompt mode the values are read one per line from stdin in this order:
message, session id, API key, appliance URL, API version (optional).

Output:
    One marker line on stdout (SUCCESS, "FAILED: reason" or "ERROR: reason")
    and exit code 0 on success, 1 on delivery failure, 2 on invalid input.

Security Note:
    Prefer CUSTOM_EVENTS_API_KEY over --api-key. Either way the key is
    replaced with a redaction marker in every log line.
"""

import argparse
import shlex
import sys
from typing import Any, Dict, List, Optional, Sequence, TextIO

from pydantic import ValidationError

from custom_events import __version__
from custom_events.config.settings import Settings, get_settings
from custom_events.delivery.reporter import report, report_error, report_unexpected
from custom_events.delivery.sender import EventSender
from custom_events.errors import InvalidConfiguration
from custom_events.models.request import create_delivery_request, describe_validation_error
from custom_events.utils.logger import REDACTED, configure_logging, get_logger

logger = get_logger(__name__)

PROMPTS = (
    ("message", "Event message: "),
    ("session_id", "Session ID: "),
    ("credential", "API key: "),
    ("endpoint_base", "Appliance URL: "),
    ("api_version", "API version (blank for default): "),
)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser reporting usage errors as InvalidConfiguration."""

    def error(self, message: str):
        raise InvalidConfiguration(f"{self.prog}: {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="custom-events",
        description="Send a custom event to an appliance user session"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--api-version",
        type=str,
        default=None,
        help="API version path segment (default: v8-preview)"
    )
    common.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Retries after the first attempt, 0-5 (default: 2)"
    )
    common.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Per-attempt timeout in seconds, 5-60 (default: 10)"
    )
    common.add_argument(
        "--enable-logging",
        action="store_true",
        help="Append diagnostics to the log file"
    )
    common.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Diagnostic log path (implies --enable-logging)"
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Minimum level of logged lines (default: INFO)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    send = subparsers.add_parser(
        "send",
        parents=[common],
        help="Send an event described by command-line arguments"
    )
    send.add_argument("--url", required=True, help="Appliance base URL (http:// or https://)")
    send.add_argument("--session-id", required=True, help="User session identifier")
    send.add_argument("--message", required=True, help="Event description (max 4096 characters)")
    send.add_argument(
        "--api-key",
        default=None,
        help="Appliance API key (default: CUSTOM_EVENTS_API_KEY)"
    )

    subparsers.add_parser(
        "prompt",
        parents=[common],
        help="Read the event inputs line by line from stdin"
    )

    return parser


def redact_argv(argv: Sequence[str], secrets: Sequence[Optional[str]] = ()) -> str:
    """
    Render an invocation for logging with the API key masked.

    Args:
        argv: Command-line arguments
        secrets: Additional secret values to mask wherever they appear

    Returns:
        Shell-quoted command string safe to log
    """
    redacted: List[str] = []
    mask_next = False
    for arg in argv:
        if mask_next:
            redacted.append(REDACTED)
            mask_next = False
        elif arg == "--api-key":
            redacted.append(arg)
            mask_next = True
        elif arg.startswith("--api-key="):
            redacted.append(f"--api-key={REDACTED}")
        else:
            for secret in secrets:
                if secret:
                    arg = arg.replace(secret, REDACTED)
            redacted.append(arg)
    return " ".join(shlex.quote(arg) if arg != REDACTED else arg for arg in redacted)


def read_prompted_inputs(stdin: TextIO, prompt_stream: TextIO) -> Dict[str, Optional[str]]:
    """
    Collect event inputs from a line-oriented channel.

    Blank or missing lines become None so defaults and validation apply
    exactly as in argument mode.
    """
    values: Dict[str, Optional[str]] = {}
    for field, prompt in PROMPTS:
        prompt_stream.write(prompt)
        prompt_stream.flush()
        try:
            line = stdin.readline().rstrip("\r\n")
        except UnicodeDecodeError:
            raise InvalidConfiguration(f"Input for {field} is not valid UTF-8 text") from None
        values[field] = line if line.strip() else None
    return values


def collect_inputs(
    args: argparse.Namespace,
    settings: Settings,
    stdin: TextIO,
    prompt_stream: TextIO,
) -> Dict[str, Any]:
    """Merge mode-specific inputs with flags and settings defaults."""
    if args.command == "prompt":
        values: Dict[str, Any] = read_prompted_inputs(stdin, prompt_stream)
    else:
        values = {
            "message": args.message,
            "session_id": args.session_id,
            "credential": args.api_key,
            "endpoint_base": args.url,
        }

    if values.get("credential") is None and settings.api_key is not None:
        values["credential"] = settings.api_key.get_secret_value()
    if values.get("credential") is None:
        raise InvalidConfiguration(
            "An API key is required (--api-key or CUSTOM_EVENTS_API_KEY)"
        )

    values["api_version"] = args.api_version or values.get("api_version") or settings.api_version
    values["max_retries"] = args.max_retries if args.max_retries is not None else settings.max_retries
    values["timeout"] = args.timeout if args.timeout is not None else settings.timeout_seconds
    return values


def _log_file(args: argparse.Namespace, settings: Settings) -> Optional[str]:
    if args.log_file:
        return args.log_file
    if args.enable_logging or settings.log_enabled:
        return settings.log_file
    return None


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    """
    Run one invocation and return the process exit code.

    Delivery problems are reported through the marker line and exit code,
    never raised, so a calling script can carry on with its own work.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr

    try:
        return _run(argv, stdin, stdout, stderr)
    except Exception as e:
        logger.exception("Unexpected error", error_type=type(e).__name__)
        return report_unexpected(e, stdout)


def _run(argv: List[str], stdin: TextIO, stdout: TextIO, stderr: TextIO) -> int:
    try:
        args = build_parser().parse_args(argv)
        settings = get_settings()
    except InvalidConfiguration as e:
        return report_error(e, stdout)
    except ValidationError as e:
        return report_error(
            InvalidConfiguration(f"Invalid settings: {describe_validation_error(e)}"),
            stdout,
        )

    try:
        inputs = collect_inputs(args, settings, stdin, stderr)
    except InvalidConfiguration as e:
        configure_logging(level=args.log_level or settings.log_level, console=stderr)
        logger.error("Invalid input", error=str(e), command=redact_argv(argv))
        return report_error(e, stdout)

    api_key = inputs["credential"]
    configure_logging(
        level=args.log_level or settings.log_level,
        log_file=_log_file(args, settings),
        secrets=[api_key],
        console=stderr,
    )
    logger.info(
        "Sending custom event",
        mode=args.command,
        command=redact_argv(argv, [api_key]),
        message=inputs["message"],
    )

    try:
        request = create_delivery_request(**inputs)
    except InvalidConfiguration as e:
        logger.error("Invalid input", error=str(e))
        return report_error(e, stdout)

    try:
        with EventSender(logger=logger) as sender:
            result = sender.send(request)
    except InvalidConfiguration as e:
        logger.error("Invalid input", error=str(e))
        return report_error(e, stdout)

    return report(result, stdout)


if __name__ == "__main__":
    sys.exit(main())
