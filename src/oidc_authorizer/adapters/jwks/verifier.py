from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import jwt
from jwt.exceptions import (
    ExpiredSignatureError,
    InvalidAlgorithmError,
    InvalidAudienceError,
    InvalidIssuerError,
    InvalidSignatureError,
    PyJWTError,
)

from ...domain.exceptions import (
    AlgorithmMismatchError,
    AudienceMismatchError,
    IssuerMismatchError,
    SignatureInvalidError,
    TokenExpiredError,
    VerificationError,
)
from ...domain.ports import TokenVerifier


class PyJWTVerifier(TokenVerifier):
    """
    Adapter implementing the TokenVerifier port using PyJWT.

    Issuer and audience are only checked when configured.
    """

    def __init__(self, leeway: float = 0) -> None:
        self._leeway = leeway

    async def verify(
        self,
        token: str,
        key: Any,
        issuer: Optional[str],
        audiences: Sequence[str],
        algorithms: Sequence[str],
    ) -> Mapping[str, Any]:
        """
        Raises:
            TokenExpiredError
            IssuerMismatchError
            AudienceMismatchError
            AlgorithmMismatchError
            SignatureInvalidError
            VerificationError
        """
        audience = list(audiences) or None
        try:
            return jwt.decode(
                token,
                key,
                algorithms=list(algorithms),
                audience=audience,
                issuer=issuer or None,
                leeway=self._leeway,
                options={"verify_aud": audience is not None},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError("jwt expired") from exc
        except InvalidIssuerError as exc:
            raise IssuerMismatchError(f"jwt issuer invalid. expected: {issuer}") from exc
        except InvalidAudienceError as exc:
            raise AudienceMismatchError(
                f"jwt audience invalid. expected: {', '.join(audiences)}"
            ) from exc
        except InvalidAlgorithmError as exc:
            raise AlgorithmMismatchError(f"invalid algorithm: {exc}") from exc
        except InvalidSignatureError as exc:
            raise SignatureInvalidError("invalid signature") from exc
        except PyJWTError as exc:
            raise VerificationError(f"Invalid token: {exc}") from exc
