"""
Module: request.py
Description: Validated input for one event delivery.

Defines DeliveryRequest and the create_delivery_request() factory that
every invocation mode (command-line arguments, line prompts, embedding
code) goes through, so validation lives in exactly one place.

Key Components:
- DeliveryRequest: Immutable, validated delivery parameters
- create_delivery_request(): Factory mapping validation errors to
  InvalidConfiguration

Dependencies: pydantic, httpx
Author: Custom Events Team
"""

import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from custom_events.config.settings import DEFAULT_API_VERSION
from custom_events.constants import (
    MAX_MESSAGE_LENGTH,
    MAX_RETRIES_LIMIT,
    MAX_TIMEOUT_SECONDS,
    MIN_TIMEOUT_SECONDS,
)
from custom_events.delivery.urls import build_event_url
from custom_events.errors import InvalidConfiguration

SESSION_ID_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
API_VERSION_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


class DeliveryRequest(BaseModel):
    """
    Parameters of a single custom event delivery.

    Instances are frozen; retries resend exactly what was validated here.

    Attributes:
        endpoint_base: Appliance URL including http:// or https://
        api_version: API version path segment (e.g. 'v8-preview')
        session_id: Session the event is attached to
        credential: Bearer token, never rendered in cleartext
        message: Event description, 1-4096 characters, sent verbatim
        max_retries: Retries after the first attempt (0-5)
        timeout: Per-attempt timeout in seconds (5-60)
    """

    model_config = ConfigDict(frozen=True)

    endpoint_base: str = Field(..., description="Appliance base URL")
    api_version: str = Field(default=DEFAULT_API_VERSION, description="API version segment")
    session_id: str = Field(..., description="User session identifier")
    credential: SecretStr = Field(..., description="Bearer token")
    message: str = Field(
        ...,
        min_length=1,
        max_length=MAX_MESSAGE_LENGTH,
        description="Event description"
    )
    max_retries: int = Field(default=2, ge=0, le=MAX_RETRIES_LIMIT)
    timeout: float = Field(default=10, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS)

    @field_validator('message', mode='before')
    @classmethod
    def validate_message_encoding(cls, v):
        """Reject text that cannot be sent as UTF-8 (lone surrogates)."""
        if isinstance(v, str):
            try:
                v.encode("utf-8")
            except UnicodeEncodeError:
                raise ValueError("message is not valid UTF-8 text") from None
        return v

    @field_validator('endpoint_base')
    @classmethod
    def validate_endpoint_base(cls, v: str) -> str:
        """Require an absolute http(s) URL with a host."""
        v = v.strip()
        if not v.lower().startswith(('http://', 'https://')):
            raise ValueError("endpoint_base must start with http:// or https://")

        try:
            host = httpx.URL(v).host
        except httpx.InvalidURL as e:
            raise ValueError(f"endpoint_base is not a valid URL: {e}") from e
        if not host:
            raise ValueError("endpoint_base must include a host")

        return v

    @field_validator('session_id')
    @classmethod
    def validate_session_id(cls, v: str) -> str:
        """Session IDs are letters, digits and hyphens only."""
        v = v.strip()
        if not SESSION_ID_PATTERN.match(v):
            raise ValueError("session_id must contain only letters, numbers, and hyphens")
        return v

    @field_validator('api_version')
    @classmethod
    def validate_api_version(cls, v: str) -> str:
        v = v.strip()
        if not API_VERSION_PATTERN.match(v):
            raise ValueError(
                "api_version must contain only letters, numbers, dots, underscores, and hyphens"
            )
        return v

    @field_validator('credential')
    @classmethod
    def validate_credential(cls, v: SecretStr) -> SecretStr:
        token = v.get_secret_value().strip()
        if not token:
            raise ValueError("credential must be a non-empty string")
        return SecretStr(token)

    @property
    def event_url(self) -> str:
        """Target URL for this request."""
        return build_event_url(self.endpoint_base, self.api_version, self.session_id)


def describe_validation_error(error: ValidationError) -> str:
    # Input values are left out so a rejected credential is never echoed
    parts = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "request"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def create_delivery_request(**fields: Any) -> DeliveryRequest:
    """
    Validate raw invocation values into a DeliveryRequest.

    Fields passed as None fall back to their defaults.

    Args:
        **fields: DeliveryRequest field values

    Returns:
        Validated DeliveryRequest

    Raises:
        InvalidConfiguration: If any value is missing, malformed or out of range
    """
    values = {name: value for name, value in fields.items() if value is not None}
    unknown = set(values) - set(DeliveryRequest.model_fields)
    if unknown:
        raise InvalidConfiguration(f"Unknown delivery parameter(s): {', '.join(sorted(unknown))}")

    try:
        return DeliveryRequest(**values)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid delivery parameters: {describe_validation_error(e)}") from None
