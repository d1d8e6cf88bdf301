from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, FrozenSet

from ..domain.constants import DEFAULT_SIGNING_ALGORITHMS
from ..domain.exceptions import ConfigurationError
from ..domain.ports import DecisionPostProcessor, PrincipalResolver


@dataclass(frozen=True, slots=True)
class AuthorizerSettings:
    """
    Authorizer configuration, resolved once and reused across invocations.

    Host code decides how to construct this; `load_settings` covers the
    usual explicit > environment > default precedence.
    """
    jwks_uri: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_audiences: Tuple[str, ...] = ()
    jwt_signing_algorithms: Tuple[str, ...] = DEFAULT_SIGNING_ALGORITHMS
    accepted_scopes: FrozenSet[str] = frozenset()

    # Exactly one of these two must be populated
    methods_applied: Tuple[str, ...] = ()
    path_mapping: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    custom_claim_namespace: Optional[str] = None

    # JWKS client tuning
    jwks_cache: bool = True
    jwks_cache_max_entries: int = 5
    jwks_cache_max_age: float = 600.0
    jwks_rate_limit: bool = False
    jwks_requests_per_minute: int = 10
    jwks_timeout: float = 10.0

    # Hooks
    principal_resolver: Optional[PrincipalResolver] = None
    post_processor: Optional[DecisionPostProcessor] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "jwt_audiences", _to_tuple(self.jwt_audiences))
        object.__setattr__(
            self, "jwt_signing_algorithms", _to_tuple(self.jwt_signing_algorithms)
        )
        object.__setattr__(self, "accepted_scopes", frozenset(_to_tuple(self.accepted_scopes)))
        object.__setattr__(self, "methods_applied", _to_tuple(self.methods_applied))
        object.__setattr__(
            self,
            "path_mapping",
            MappingProxyType(
                {method: _to_tuple(paths) for method, paths in (self.path_mapping or {}).items()}
            ),
        )
        self.validate()

    def validate(self) -> None:
        if not self.methods_applied and not self.path_mapping:
            raise ConfigurationError("Must supply either path_mapping or methods_applied")
        if self.methods_applied and self.path_mapping:
            raise ConfigurationError(
                "Supply only one of path_mapping or methods_applied, not both"
            )
        if not self.jwt_signing_algorithms:
            raise ConfigurationError("At least one signing algorithm is required")
        if self.jwks_cache_max_entries < 1:
            raise ConfigurationError("jwks_cache_max_entries must be at least 1")
        if self.jwks_requests_per_minute < 1:
            raise ConfigurationError("jwks_requests_per_minute must be at least 1")

    @property
    def uses_path_mapping(self) -> bool:
        return bool(self.path_mapping)


def _to_tuple(values) -> Tuple[str, ...]:
    """A plain string is a single value, not a sequence of characters."""
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)
