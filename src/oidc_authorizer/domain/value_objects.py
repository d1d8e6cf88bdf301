# src/oidc_authorizer/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from .constants import EventType
from .exceptions import (
    MalformedResourceError,
    MissingTokenError,
    UnsupportedEventTypeError,
)


# --- Events ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RequestEvent:
    """
    A REQUEST-type authorizer event.

    Headers are kept exactly as the gateway sent them; header maps are not
    guaranteed to be normalized, so lookups go through `header()`.
    """
    headers: Mapping[str, str]
    method_arn: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        value = self.headers.get(name) or self.headers.get(name.lower())
        if value:
            return value
        wanted = name.lower()
        for key, candidate in self.headers.items():
            if isinstance(key, str) and key.lower() == wanted and candidate:
                return candidate
        return None


@dataclass(frozen=True, slots=True)
class TokenEvent:
    """A TOKEN-type authorizer event carrying a single authorization value."""
    authorization_token: Optional[str]
    method_arn: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict)


AccessEvent = Union[RequestEvent, TokenEvent]


def parse_event(raw: Mapping[str, Any] | None) -> AccessEvent:
    """
    Turn a raw gateway event into one of the supported event variants.

    Raises:
        MissingTokenError when no event is given at all.
        UnsupportedEventTypeError when `type` is not REQUEST or TOKEN.
    """
    if not raw:
        raise MissingTokenError("No authorization token present")

    event_type = raw.get("type")
    frozen = MappingProxyType(dict(raw))

    if event_type == EventType.REQUEST.value:
        return RequestEvent(
            headers=dict(raw.get("headers") or {}),
            method_arn=raw.get("methodArn"),
            raw=frozen,
        )
    if event_type == EventType.TOKEN.value:
        return TokenEvent(
            authorization_token=raw.get("authorizationToken"),
            method_arn=raw.get("methodArn"),
            raw=frozen,
        )
    raise UnsupportedEventTypeError(f"Unsupported event type {event_type}")


# --- Resource ARN ----------------------------------------------------------

ARN_FIELD_COUNT = 6
RESOURCE_FIELD = 5

METHOD_SEGMENT = 2
PATH_SEGMENT = 3


@dataclass(frozen=True, slots=True)
class ResourceArn:
    """
    `arn:partition:service:region:account:apiId/stage/METHOD/path...`

    Both levels are kept as split lists so a rewritten ARN re-joins to the
    exact input bytes for every field that was not touched.
    """
    fields: Tuple[str, ...]
    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, value: str) -> "ResourceArn":
        fields = tuple(value.split(":"))
        if len(fields) < ARN_FIELD_COUNT:
            raise MalformedResourceError(f"Invalid resource ARN: {value!r}")
        return cls(fields=fields, segments=tuple(fields[RESOURCE_FIELD].split("/")))

    @property
    def api_id(self) -> str:
        return self.segments[0]

    @property
    def stage(self) -> Optional[str]:
        return self.segments[1] if len(self.segments) > 1 else None

    def with_segments(self, segments: Tuple[str, ...]) -> "ResourceArn":
        return ResourceArn(fields=self.fields, segments=tuple(segments))

    def __str__(self) -> str:
        fields = list(self.fields)
        fields[RESOURCE_FIELD] = "/".join(self.segments)
        return ":".join(fields)
