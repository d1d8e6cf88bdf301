from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ...domain.exceptions import (
    MissingTokenError,
    UnsupportedEventTypeError,
    UnsupportedSchemeError,
)
from ...domain.value_objects import AccessEvent, RequestEvent, TokenEvent, parse_event

BEARER_SCHEME = "bearer"


def _bearer_credentials(value: str) -> str:
    """
    "Bearer <token>" -> "<token>".

    The value is split on single spaces exactly once per the wire format the
    gateway forwards; anything after the second part is ignored.
    """
    parts = value.split(" ")
    if not parts[0] or parts[0].lower() != BEARER_SCHEME:
        raise UnsupportedSchemeError("Only bearer tokens supported")
    if len(parts) < 2 or not parts[1]:
        raise MissingTokenError("Bearer scheme given without a token")
    return parts[1]


def request_event_access_token(event: RequestEvent) -> str:
    auth_header: Optional[str] = event.header("Authorization")
    if not auth_header:
        raise MissingTokenError("No authorization header present")
    return _bearer_credentials(auth_header)


def token_event_access_token(event: TokenEvent) -> str:
    if not event.authorization_token:
        raise MissingTokenError("No authorization token present")
    return _bearer_credentials(event.authorization_token)


def extract_access_token(event: Union[AccessEvent, Mapping[str, Any], None]) -> str:
    """
    Pull the bearer token out of a REQUEST or TOKEN event.

    Accepts either a raw gateway event mapping or an already parsed event.

    Raises:
        MissingTokenError
        UnsupportedSchemeError
        UnsupportedEventTypeError
    """
    if not isinstance(event, (RequestEvent, TokenEvent)):
        event = parse_event(event)

    if isinstance(event, RequestEvent):
        return request_event_access_token(event)
    if isinstance(event, TokenEvent):
        return token_event_access_token(event)
    raise UnsupportedEventTypeError(f"Unsupported event type {type(event).__name__}")
