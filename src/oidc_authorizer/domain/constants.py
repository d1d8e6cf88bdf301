from enum import Enum


class Effect(str, Enum):
    ALLOW = "Allow"
    DENY = "Deny"


class EventType(str, Enum):
    REQUEST = "REQUEST"
    TOKEN = "TOKEN"


POLICY_VERSION = "2012-10-17"
INVOKE_ACTION = "execute-api:Invoke"

# Returned in place of a policy whenever a request cannot be authorized.
UNAUTHORIZED = "Unauthorized"

DEFAULT_PRINCIPAL_ID = "user"
DEFAULT_SIGNING_ALGORITHMS = ("RS256",)
