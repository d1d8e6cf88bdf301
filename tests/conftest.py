# tests/conftest.py
import json
import time

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

KID = "test-key"
ISSUER = "https://issuer.example.com/"
AUDIENCE = "https://localhost:3000"
METHOD_ARN = (
    "arn:aws:execute-api:us-east-1:random-account-id:"
    "random-api-id/local/DELETE/steare/authorizer-test"
)


@pytest.fixture(scope="session")
def private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_jwk(private_key):
    jwk = json.loads(jwt.algorithms.RSAAlgorithm.to_jwk(private_key.public_key()))
    jwk.update({"kid": KID, "use": "sig", "alg": "RS256"})
    return jwk


@pytest.fixture
def make_token(private_key):
    def _make(
            scope="write:resource read:resource",
            *,
            kid=KID,
            key=None,
            expires_in=300,
            **claims,
    ):
        payload = {
            "iss": ISSUER,
            "aud": AUDIENCE,
            "sub": "client-123@clients",
            "iat": int(time.time()),
            "exp": int(time.time()) + expires_in,
        }
        if scope is not None:
            payload["scope"] = scope
        payload.update(claims)
        headers = {"kid": kid} if kid is not None else None
        return jwt.encode(payload, key or private_key, algorithm="RS256", headers=headers)

    return _make


class JWKSEndpoint:
    """MockTransport handler that serves a JWKS document and counts hits."""

    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def jwks_endpoint(public_jwk):
    return JWKSEndpoint({"keys": [public_jwk]})


def request_event(authorization=None, method_arn=METHOD_ARN, headers=None):
    headers = dict(headers or {})
    if authorization is not None:
        headers["Authorization"] = authorization
    return {
        "type": "REQUEST",
        "path": "/steare/authorizer-test",
        "httpMethod": "DELETE",
        "headers": headers,
        "pathParameters": None,
        "queryStringParameters": None,
        "methodArn": method_arn,
    }


def token_event(authorization_token, method_arn=METHOD_ARN):
    return {
        "type": "TOKEN",
        "authorizationToken": authorization_token,
        "methodArn": method_arn,
    }
