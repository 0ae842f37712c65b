"""
Module: encoder.py
Description: Request body and header encoding for event delivery.
"""

import json
from typing import Dict

from pydantic import SecretStr


def encode_event_body(message: str) -> bytes:
    """
    Encode the event message as the JSON request body.

    The message is kept verbatim: only standard JSON string escaping is
    applied and non-ASCII characters stay as UTF-8.

    Args:
        message: Event description

    Returns:
        UTF-8 encoded JSON document {"description": message}
    """
    return json.dumps({"description": message}, ensure_ascii=False).encode("utf-8")


def build_headers(credential: SecretStr) -> Dict[str, str]:
    """Headers for an authenticated JSON POST."""
    return {
        "Authorization": f"Bearer {credential.get_secret_value()}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
