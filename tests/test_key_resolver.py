# tests/test_key_resolver.py
import asyncio

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from oidc_authorizer.adapters.jwks.key_resolver import JWKSKeyResolver
from oidc_authorizer.domain.exceptions import KeyRetrievalError

from conftest import JWKSEndpoint, KID

JWKS_URI = "https://issuer.example.com/.well-known/jwks.json"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def _resolve(resolver, kid=KID):
    return asyncio.run(resolver.resolve_key(kid))


def test_resolves_matching_key(jwks_endpoint, private_key):
    resolver = JWKSKeyResolver(JWKS_URI, client=jwks_endpoint.client())
    key = _resolve(resolver)

    assert isinstance(key, rsa.RSAPublicKey)
    assert key.public_numbers() == private_key.public_key().public_numbers()


def test_caches_resolved_keys(jwks_endpoint):
    clock = FakeClock()
    resolver = JWKSKeyResolver(
        JWKS_URI, client=jwks_endpoint.client(), cache_max_age=60, clock=clock
    )

    _resolve(resolver)
    _resolve(resolver)
    assert jwks_endpoint.calls == 1

    clock.now += 61
    _resolve(resolver)
    assert jwks_endpoint.calls == 2


def test_cache_can_be_disabled(jwks_endpoint):
    resolver = JWKSKeyResolver(JWKS_URI, client=jwks_endpoint.client(), cache=False)
    _resolve(resolver)
    _resolve(resolver)
    assert jwks_endpoint.calls == 2


def test_cache_evicts_least_recently_used(public_jwk):
    second = dict(public_jwk, kid="second")
    endpoint = JWKSEndpoint({"keys": [public_jwk, second]})
    resolver = JWKSKeyResolver(JWKS_URI, client=endpoint.client(), cache_max_entries=1)

    _resolve(resolver, KID)
    _resolve(resolver, "second")
    _resolve(resolver, "second")
    assert endpoint.calls == 2

    _resolve(resolver, KID)
    assert endpoint.calls == 3


def test_rate_limits_fetches(jwks_endpoint):
    clock = FakeClock()
    resolver = JWKSKeyResolver(
        JWKS_URI,
        client=jwks_endpoint.client(),
        cache=False,
        rate_limit=True,
        requests_per_minute=2,
        clock=clock,
    )

    _resolve(resolver)
    _resolve(resolver)
    with pytest.raises(KeyRetrievalError, match="Too many requests"):
        _resolve(resolver)
    assert jwks_endpoint.calls == 2

    clock.now += 60
    _resolve(resolver)
    assert jwks_endpoint.calls == 3


def test_unknown_kid(jwks_endpoint):
    resolver = JWKSKeyResolver(JWKS_URI, client=jwks_endpoint.client())
    with pytest.raises(KeyRetrievalError, match="Unable to find a signing key that matches 'nope'"):
        _resolve(resolver, "nope")


def test_ignores_encryption_keys(public_jwk):
    endpoint = JWKSEndpoint({"keys": [dict(public_jwk, use="enc")]})
    resolver = JWKSKeyResolver(JWKS_URI, client=endpoint.client())
    with pytest.raises(KeyRetrievalError, match="signing keys"):
        _resolve(resolver)


@pytest.mark.parametrize(
    "endpoint",
    [
        JWKSEndpoint({"keys": []}),
        JWKSEndpoint({"nothing": "here"}),
        JWKSEndpoint("<html>not json</html>"),
        JWKSEndpoint({"error": "boom"}, status_code=500),
        JWKSEndpoint({"keys": [{"kid": KID, "kty": "RSA"}]}),
    ],
)
def test_endpoint_failures(endpoint):
    resolver = JWKSKeyResolver(JWKS_URI, client=endpoint.client())
    with pytest.raises(KeyRetrievalError):
        _resolve(resolver)


def test_transport_errors():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(unreachable))
    resolver = JWKSKeyResolver(JWKS_URI, client=client)
    with pytest.raises(KeyRetrievalError, match="Unable to reach JWKS endpoint"):
        _resolve(resolver)


def test_missing_uri():
    with pytest.raises(KeyRetrievalError, match="No JWKS URI configured"):
        _resolve(JWKSKeyResolver(None))
