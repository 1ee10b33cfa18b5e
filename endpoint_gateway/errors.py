"""Errors raised while resolving and initializing a custom endpoint.

Credential errors a caller is expected to act on (asking the user for a key,
or for a fresh one) carry a machine-readable ``error_type`` and a JSON message,
so HTTP handlers can forward them without parsing free text.
"""

import json
from enum import Enum


class ErrorType(str, Enum):
    NO_USER_KEY = "no_user_key"
    NO_BASE_URL = "no_base_url"
    EXPIRED_USER_KEY = "expired_user_key"


class EndpointError(Exception):
    """Base class for custom endpoint initialization failures."""

    def __init__(self, message: str, endpoint: str = "") -> None:
        self.message = message
        self.endpoint = endpoint
        super().__init__(message)


class ConfigNotFoundError(EndpointError):
    def __init__(self, endpoint: str) -> None:
        super().__init__(f"Config not found for the {endpoint} custom endpoint.", endpoint)


class MissingEnvVarError(EndpointError):
    """A `${VAR}` placeholder in the endpoint config did not resolve."""

    def __init__(self, field_label: str, endpoint: str) -> None:
        self.field_label = field_label
        super().__init__(f"Missing {field_label} for {endpoint}.", endpoint)


class MissingCredentialError(EndpointError):
    """A literal API key or base URL resolved to an empty value."""

    def __init__(self, field_label: str, endpoint: str) -> None:
        self.field_label = field_label
        super().__init__(f"{endpoint} {field_label} not provided.", endpoint)


class StructuredEndpointError(EndpointError):
    """Error whose message is a JSON object tagged with an ErrorType."""

    def __init__(self, error_type: ErrorType, endpoint: str = "", details: dict | None = None) -> None:
        self.error_type = error_type
        self.details = details or {}
        super().__init__(json.dumps(self.payload), endpoint)

    @property
    def payload(self) -> dict:
        return {"type": self.error_type.value, **self.details}


class UserCredentialError(StructuredEndpointError):
    """The user-provided key or base URL is missing from the credential store."""

    def __init__(self, error_type: ErrorType, endpoint: str = "") -> None:
        super().__init__(error_type, endpoint)


class ExpiredUserKeyError(StructuredEndpointError):
    def __init__(self, expired_at: str, endpoint: str) -> None:
        self.expired_at = expired_at
        super().__init__(
            ErrorType.EXPIRED_USER_KEY,
            endpoint,
            details={"expiredAt": expired_at, "endpoint": endpoint},
        )
