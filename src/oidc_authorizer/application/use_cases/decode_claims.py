from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Tuple

import jwt
from jwt.exceptions import DecodeError, InvalidTokenError as JWTInvalidTokenError

from ...domain.entities import DecodedClaims
from ...domain.exceptions import MalformedTokenError


def split_scopes(scope: str) -> Tuple[str, ...]:
    # "" must give no scopes at all, not a single empty scope
    if not scope:
        return ()
    return tuple(scope.split(" "))


def _audiences(aud_claim: Any) -> Tuple[str, ...]:
    if aud_claim is None:
        return ()
    if isinstance(aud_claim, str):
        return (aud_claim,)
    return tuple(str(a) for a in aud_claim)


def decode_claims(token: str) -> DecodedClaims:
    """
    Decode a compact JWT *without* verifying it.

    Used only to discover the `kid` to fetch and to preview claims; the
    signature is checked later by a TokenVerifier.

    Raises:
        MalformedTokenError
    """
    try:
        header: Mapping[str, Any] = jwt.get_unverified_header(token)
        payload: Mapping[str, Any] = jwt.decode(
            token,
            options={"verify_signature": False},
        )
    except (DecodeError, JWTInvalidTokenError) as exc:
        raise MalformedTokenError(
            f"Error parsing jwt token. Token may be malformed: {exc}"
        ) from exc

    kid = header.get("kid")
    if not kid:
        raise MalformedTokenError("Token header has no key id (kid)")

    scope = payload.get("scope") or ""
    if not isinstance(scope, str):
        raise MalformedTokenError("Token scope claim must be a space-delimited string")

    try:
        audience = _audiences(payload.get("aud"))
    except TypeError as exc:
        raise MalformedTokenError("Token aud claim must be a string or a list") from exc

    return DecodedClaims(
        kid=str(kid),
        issuer=payload.get("iss"),
        audience=audience,
        scopes=split_scopes(scope),
        raw=MappingProxyType(dict(payload)),
    )
