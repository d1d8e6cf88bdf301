from __future__ import annotations

from typing import Any, Awaitable, Mapping, Protocol, Sequence, Union

from .entities import DecisionDocument, DecodedClaims, PostProcessContext


class KeyResolver(Protocol):
    """
    Port for turning a token `kid` into verification key material.

    Implementations live in the adapters layer (e.g. the JWKS client) and
    own whatever caching / rate limiting they need.
    """

    async def resolve_key(self, key_id: str) -> Any:
        """
        Raises:
          - KeyRetrievalError
        """
        ...


class TokenVerifier(Protocol):
    """
    Port for cryptographic verification of a token.

    Should:
      - verify signature with the given key
      - check issuer, audience, algorithm and expiry
    Raises:
      - VerificationError (or one of its subclasses)
    """

    async def verify(
        self,
        token: str,
        key: Any,
        issuer: str | None,
        audiences: Sequence[str],
        algorithms: Sequence[str],
    ) -> Mapping[str, Any]:
        ...


class PrincipalResolver(Protocol):
    """Hook: pick the principal id for a verified token."""

    def __call__(
        self, settings: Any, claims: DecodedClaims
    ) -> Union[str, None, Awaitable[str | None]]:
        ...


class DecisionPostProcessor(Protocol):
    """Hook: inspect or rewrite the decision before it is returned."""

    def __call__(
        self, context: PostProcessContext
    ) -> Union[DecisionDocument, Awaitable[DecisionDocument]]:
        ...
