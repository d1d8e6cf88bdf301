from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .constants import Effect, INVOKE_ACTION, POLICY_VERSION


@dataclass(frozen=True, slots=True)
class DecodedClaims:
    """
    Claims read from a token before (and independently of) verification.

    `scopes` is the space-split `scope` claim; `raw` is the full payload,
    exposed read-only for hooks.
    """
    kid: str
    issuer: Optional[str] = None
    audience: Tuple[str, ...] = ()
    scopes: Tuple[str, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def subject(self) -> Optional[str]:
        sub = self.raw.get("sub")
        return str(sub) if sub is not None else None

    def namespaced(self, namespace: Optional[str]) -> Dict[str, Any]:
        """
        Custom claims published under a namespace prefix, keyed without it.

        e.g. namespace "https://example.com/" turns
        {"https://example.com/tenant": "acme"} into {"tenant": "acme"}.
        """
        if not namespace:
            return {}
        return {
            key[len(namespace):]: value
            for key, value in self.raw.items()
            if key.startswith(namespace) and len(key) > len(namespace)
        }


@dataclass(frozen=True, slots=True)
class Statement:
    effect: Effect
    resource: str
    action: str = INVOKE_ACTION

    def to_dict(self) -> Dict[str, str]:
        return {
            "Action": self.action,
            "Effect": self.effect.value,
            "Resource": self.resource,
        }


@dataclass(frozen=True, slots=True)
class DecisionDocument:
    """
    Aggregate returned to the gateway: principal plus policy statements.

    `context` is optional and only set by post-processors; the gateway
    forwards it to the integration as-is.
    """
    principal_id: str
    statements: Tuple[Statement, ...] = ()
    version: str = POLICY_VERSION
    context: Optional[Mapping[str, Any]] = None

    @property
    def effects(self) -> set:
        return {s.effect for s in self.statements}

    def to_dict(self) -> Dict[str, Any]:
        statements: List[Dict[str, str]] = [s.to_dict() for s in self.statements]
        document: Dict[str, Any] = {
            "principalId": self.principal_id,
            "policyDocument": {
                "Version": self.version,
                "Statement": statements,
            },
        }
        if self.context:
            document["context"] = dict(self.context)
        return document


@dataclass(frozen=True, slots=True)
class PostProcessContext:
    """
    Everything a post-processor hook gets to look at.

    `event` is the raw gateway event and `context` the host runtime context
    (e.g. the Lambda context object), both passed through untouched.
    """
    event: Mapping[str, Any]
    context: Any
    policy: DecisionDocument
    decoded_claims: DecodedClaims
    settings: Any
