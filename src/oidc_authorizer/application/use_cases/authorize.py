from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from ...config.settings import AuthorizerSettings
from ...domain.constants import DEFAULT_PRINCIPAL_ID, Effect, UNAUTHORIZED
from ...domain.entities import DecisionDocument, DecodedClaims, PostProcessContext
from ...domain.exceptions import (
    AuthorizerError,
    HookError,
    KeyRetrievalError,
    VerificationError,
)
from ...domain.ports import KeyResolver, TokenVerifier
from ...domain.value_objects import parse_event
from ..hooks import maybe_await
from .build_policy import build_policy
from .decide_scope import decide_scope
from .decode_claims import decode_claims
from .extract_token import extract_access_token

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AuthorizeRequestUseCase:
    """
    Application use case:
    - Extract the bearer token from a gateway event
    - Resolve its signing key and verify it
    - Compare scopes and build an Allow / Deny decision document
    - Run the post-processor hook, if any

    `decide` raises the domain exceptions; `execute` is the trust boundary
    and collapses every failure into the UNAUTHORIZED sentinel.
    """

    settings: AuthorizerSettings
    key_resolver: KeyResolver
    token_verifier: TokenVerifier

    async def execute(
            self,
            event: Mapping[str, Any] | None,
            context: Any = None,
    ) -> Union[DecisionDocument, str]:
        try:
            return await self.decide(event, context)
        except AuthorizerError as exc:
            logger.info("Denying access (%s: %s)", type(exc).__name__, exc)
        except Exception:  # noqa: BLE001
            logger.exception("Denying access after unexpected error")
        return UNAUTHORIZED

    async def decide(
            self,
            event: Mapping[str, Any] | None,
            context: Any = None,
    ) -> DecisionDocument:
        """
        Run the full pipeline for one event.

        Raises:
            AccessTokenError
            MalformedTokenError
            KeyRetrievalError
            VerificationError
            PolicyGenerationError
            HookError
        """
        parsed = parse_event(event)
        access_token = extract_access_token(parsed)
        claims = decode_claims(access_token)

        try:
            key = await self.key_resolver.resolve_key(claims.kid)
        except KeyRetrievalError:
            raise
        except Exception as exc:
            raise KeyRetrievalError(f"Signature key retrieval failed: {exc}") from exc

        try:
            await self.token_verifier.verify(
                access_token,
                key,
                self.settings.jwt_issuer,
                self.settings.jwt_audiences,
                self.settings.jwt_signing_algorithms,
            )
        except VerificationError:
            raise
        except Exception as exc:
            raise VerificationError(f"JWT verification error: {exc}") from exc

        logger.debug("Accepted scopes: %s", sorted(self.settings.accepted_scopes))
        logger.debug("Actual scopes: %s", list(claims.scopes))
        effect = decide_scope(claims.scopes, self.settings.accepted_scopes)
        if effect is Effect.ALLOW:
            logger.debug("Scope found. Allow access")
        else:
            logger.debug("Scope not found. Deny access")

        policy = build_policy(
            await self._principal_id(claims),
            effect,
            parsed.method_arn,
            self.settings.methods_applied,
            self.settings.path_mapping,
        )
        logger.debug("Generated policy: %s", policy.to_dict())

        return await self._post_process(event, context, policy, claims)

    # ------------------------------------------------------------------ #
    # Hooks
    # ------------------------------------------------------------------ #

    async def _principal_id(self, claims: DecodedClaims) -> str:
        resolver = self.settings.principal_resolver
        if resolver is None:
            return DEFAULT_PRINCIPAL_ID
        try:
            principal_id = await maybe_await(resolver(self.settings, claims))
        except Exception as exc:
            raise HookError(f"Principal resolver failed: {exc}") from exc
        return str(principal_id) if principal_id else DEFAULT_PRINCIPAL_ID

    async def _post_process(
            self,
            event: Mapping[str, Any],
            context: Any,
            policy: DecisionDocument,
            claims: DecodedClaims,
    ) -> DecisionDocument:
        post_processor = self.settings.post_processor
        if post_processor is None:
            return policy

        logger.debug("Post policy hook executing")
        hook_context = PostProcessContext(
            event=event,
            context=context,
            policy=policy,
            decoded_claims=claims,
            settings=self.settings,
        )
        try:
            result = await maybe_await(post_processor(hook_context))
        except Exception as exc:
            raise HookError(f"Post policy hook failed: {exc}") from exc

        if not isinstance(result, DecisionDocument):
            raise HookError(
                f"Post policy hook must return a DecisionDocument, got {type(result).__name__}"
            )
        return result
