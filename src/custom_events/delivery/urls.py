"""
Module: urls.py
Description: Builds the appliance event endpoint address.
"""

from custom_events.constants import EVENTS_PATH_TEMPLATE
from custom_events.errors import InvalidConfiguration


def build_event_url(endpoint_base: str, api_version: str, session_id: str) -> str:
    """
    Build the events endpoint URL for a session.

    Exactly one trailing '/' is trimmed from endpoint_base, so
    'https://host/' and 'https://host' produce the same URL. No escaping
    is applied; session_id is expected to be validated already.

    Args:
        endpoint_base: Appliance base URL with http:// or https:// scheme
        api_version: API version path segment
        session_id: Session identifier

    Returns:
        Full URL of the events endpoint

    Raises:
        InvalidConfiguration: If endpoint_base lacks an http(s) scheme
    """
    if endpoint_base.endswith("/"):
        endpoint_base = endpoint_base[:-1]

    if not endpoint_base.lower().startswith(("http://", "https://")):
        raise InvalidConfiguration(
            "Appliance URL must start with http:// or https://"
        )

    return endpoint_base + EVENTS_PATH_TEMPLATE.format(
        api_version=api_version,
        session_id=session_id,
    )
