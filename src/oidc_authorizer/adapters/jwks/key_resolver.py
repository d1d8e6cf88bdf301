from __future__ import annotations

import json
import logging
import time
from collections import OrderedDict, deque
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

import httpx
import jwt
from jwt.exceptions import PyJWTError

from ...domain.exceptions import KeyRetrievalError
from ...domain.ports import KeyResolver

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW_SECONDS = 60.0


class JWKSKeyResolver(KeyResolver):
    """
    Adapter implementing the KeyResolver port against a JWKS endpoint.

    Infrastructure layer:
    - Knows how to talk to the issuer's JWKS endpoint (httpx).
    - Knows how to turn a JWK into key material (PyJWT).
    - Caches resolved keys per kid and optionally rate-limits fetches.

    One instance belongs to one configured authorizer; instances never share
    cache state.
    """

    def __init__(
        self,
        jwks_uri: Optional[str],
        *,
        cache: bool = True,
        cache_max_entries: int = 5,
        cache_max_age: float = 600.0,
        rate_limit: bool = False,
        requests_per_minute: int = 10,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._jwks_uri = jwks_uri
        self._cache_enabled = cache
        self._cache_max_entries = cache_max_entries
        self._cache_max_age = cache_max_age
        self._rate_limit = rate_limit
        self._requests_per_minute = requests_per_minute
        self._timeout = timeout
        self._client = client
        self._clock = clock

        self._keys: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._fetches: Deque[float] = deque()

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    async def resolve_key(self, key_id: str) -> Any:
        """
        Return verification key material for `key_id`.

        Raises:
            KeyRetrievalError
        """
        cached = self._cached_key(key_id)
        if cached is not None:
            logger.debug("JWKS cache hit for kid %s", key_id)
            return cached

        signing_keys = await self._fetch_signing_keys()
        jwk = next((k for k in signing_keys if k.get("kid") == key_id), None)
        if jwk is None:
            raise KeyRetrievalError(f"Unable to find a signing key that matches '{key_id}'")

        try:
            key = jwt.PyJWK(jwk).key
        except (PyJWTError, ValueError, TypeError) as exc:
            raise KeyRetrievalError(f"Unsupported signing key '{key_id}': {exc}") from exc

        self._store_key(key_id, key)
        return key

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _cached_key(self, key_id: str) -> Any:
        if not self._cache_enabled:
            return None
        entry = self._keys.get(key_id)
        if entry is None:
            return None
        key, stored_at = entry
        if self._clock() - stored_at >= self._cache_max_age:
            del self._keys[key_id]
            return None
        self._keys.move_to_end(key_id)
        return key

    def _store_key(self, key_id: str, key: Any) -> None:
        if not self._cache_enabled:
            return
        self._keys[key_id] = (key, self._clock())
        self._keys.move_to_end(key_id)
        while len(self._keys) > self._cache_max_entries:
            self._keys.popitem(last=False)

    def _take_rate_limit_token(self) -> None:
        if not self._rate_limit:
            return
        now = self._clock()
        while self._fetches and now - self._fetches[0] >= RATE_LIMIT_WINDOW_SECONDS:
            self._fetches.popleft()
        if len(self._fetches) >= self._requests_per_minute:
            raise KeyRetrievalError(
                f"Too many requests to the JWKS endpoint ({self._requests_per_minute}/min)"
            )
        self._fetches.append(now)

    async def _fetch_signing_keys(self) -> List[Dict[str, Any]]:
        if not self._jwks_uri:
            raise KeyRetrievalError("No JWKS URI configured")

        self._take_rate_limit_token()
        logger.debug("Fetching JWKS from %s", self._jwks_uri)

        try:
            if self._client is not None:
                response = await self._client.get(self._jwks_uri)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._jwks_uri)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise KeyRetrievalError(
                f"JWKS endpoint returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise KeyRetrievalError(f"Unable to reach JWKS endpoint: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise KeyRetrievalError("JWKS endpoint did not return JSON") from exc

        keys = body.get("keys") if isinstance(body, dict) else None
        if not keys:
            raise KeyRetrievalError("The JWKS endpoint did not contain any keys")

        signing_keys = [
            k for k in keys
            if isinstance(k, dict) and k.get("kid") and k.get("use", "sig") == "sig"
        ]
        if not signing_keys:
            raise KeyRetrievalError("The JWKS endpoint did not contain any signing keys")
        return signing_keys
