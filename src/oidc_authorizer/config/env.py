from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from ..domain.constants import DEFAULT_SIGNING_ALGORITHMS
from ..domain.exceptions import ConfigurationError
from .settings import AuthorizerSettings

ENV_JWKS_URI = "AUTHORIZER_JWKS_URI"
ENV_ACCEPTED_AUDIENCES = "AUTHORIZER_ACCEPTED_AUDIENCES"
ENV_ACCEPTED_ISSUER = "AUTHORIZER_ACCEPTED_ISSUER"
ENV_SIGNING_ALGORITHMS = "AUTHORIZER_SIGNING_ALGORITHMS"
ENV_CUSTOM_CLAIM_NAMESPACE = "AUTHORIZER_CUSTOM_CLAIM_NAMESPACE"


def _split_csv(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [x.strip() for x in raw.split(",") if x and x.strip()]


def defaults_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Settings values sourced from environment variables (unset ones omitted)."""
    env = os.environ if environ is None else environ
    defaults: dict[str, Any] = {}

    if env.get(ENV_JWKS_URI):
        defaults["jwks_uri"] = env[ENV_JWKS_URI]
    if env.get(ENV_ACCEPTED_ISSUER):
        defaults["jwt_issuer"] = env[ENV_ACCEPTED_ISSUER]
    if env.get(ENV_CUSTOM_CLAIM_NAMESPACE):
        defaults["custom_claim_namespace"] = env[ENV_CUSTOM_CLAIM_NAMESPACE]

    audiences = _split_csv(env.get(ENV_ACCEPTED_AUDIENCES))
    if audiences:
        defaults["jwt_audiences"] = tuple(audiences)

    algorithms = _split_csv(env.get(ENV_SIGNING_ALGORITHMS))
    if algorithms:
        defaults["jwt_signing_algorithms"] = tuple(algorithms)

    return defaults


def load_settings(
    *,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> AuthorizerSettings:
    """
    Build AuthorizerSettings with precedence:
        explicit keyword argument > environment variable > built-in default

    Overrides set to None are treated as "not given".

    Raises:
        ConfigurationError on unknown keys or invalid combinations.
    """
    known = set(AuthorizerSettings.__dataclass_fields__)
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(unknown)}")

    values: dict[str, Any] = {"jwt_signing_algorithms": DEFAULT_SIGNING_ALGORITHMS}
    values.update(defaults_from_env(environ))
    values.update({k: v for k, v in overrides.items() if v is not None})
    return AuthorizerSettings(**values)
