from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ...adapters.jwks.key_resolver import JWKSKeyResolver
from ...adapters.jwks.verifier import PyJWTVerifier
from ...application.use_cases.authorize import AuthorizeRequestUseCase
from ...config.env import load_settings
from ...config.settings import AuthorizerSettings
from ...domain.entities import DecisionDocument
from ...domain.ports import KeyResolver, TokenVerifier


@dataclass(slots=True)
class Authorizer:
    """
    Framework-agnostic authorizer facade.

    Host adapters (Lambda handler, CLI, ...) wrap this in their own calling
    convention.
    """

    use_case: AuthorizeRequestUseCase

    @property
    def settings(self) -> AuthorizerSettings:
        return self.use_case.settings

    async def authorize(
            self,
            event: Mapping[str, Any] | None,
            context: Any = None,
    ) -> Union[DecisionDocument, str]:
        """Event -> DecisionDocument, or UNAUTHORIZED on any failure."""
        return await self.use_case.execute(event, context)


def create_authorizer(
        settings: Optional[AuthorizerSettings] = None,
        *,
        key_resolver: Optional[KeyResolver] = None,
        token_verifier: Optional[TokenVerifier] = None,
        **overrides: Any,
) -> Authorizer:
    """
    High-level factory: settings -> Authorizer.

    - resolves settings once (explicit > env > defaults) unless given
    - builds a JWKS key resolver owned by this authorizer alone
    - wires AuthorizeRequestUseCase

    Raises:
        ConfigurationError
    """
    if settings is None:
        settings = load_settings(**overrides)
    elif overrides:
        raise TypeError("Pass either a settings object or keyword overrides, not both")

    resolver = key_resolver or JWKSKeyResolver(
        settings.jwks_uri,
        cache=settings.jwks_cache,
        cache_max_entries=settings.jwks_cache_max_entries,
        cache_max_age=settings.jwks_cache_max_age,
        rate_limit=settings.jwks_rate_limit,
        requests_per_minute=settings.jwks_requests_per_minute,
        timeout=settings.jwks_timeout,
    )

    use_case = AuthorizeRequestUseCase(
        settings=settings,
        key_resolver=resolver,
        token_verifier=token_verifier or PyJWTVerifier(),
    )
    return Authorizer(use_case=use_case)
