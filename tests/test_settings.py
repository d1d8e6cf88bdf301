# tests/test_settings.py
import pytest

from oidc_authorizer.config.env import defaults_from_env, load_settings
from oidc_authorizer.config.settings import AuthorizerSettings
from oidc_authorizer.domain.exceptions import ConfigurationError

ENV = {
    "AUTHORIZER_JWKS_URI": "https://jwks.com",
    "AUTHORIZER_ACCEPTED_AUDIENCES": "testaud1, testaud2",
    "AUTHORIZER_ACCEPTED_ISSUER": "https://issuer.com",
    "AUTHORIZER_SIGNING_ALGORITHMS": "RS256, RS512",
    "AUTHORIZER_CUSTOM_CLAIM_NAMESPACE": "https://example.com/",
}


def test_defaults_from_env():
    assert defaults_from_env(ENV) == {
        "jwks_uri": "https://jwks.com",
        "jwt_audiences": ("testaud1", "testaud2"),
        "jwt_issuer": "https://issuer.com",
        "jwt_signing_algorithms": ("RS256", "RS512"),
        "custom_claim_namespace": "https://example.com/",
    }
    assert defaults_from_env({}) == {}


def test_builtin_defaults():
    settings = load_settings(environ={}, methods_applied=["GET"])

    assert settings.jwks_uri is None
    assert settings.jwt_issuer is None
    assert settings.jwt_audiences == ()
    assert settings.jwt_signing_algorithms == ("RS256",)
    assert settings.accepted_scopes == frozenset()
    assert settings.methods_applied == ("GET",)
    assert dict(settings.path_mapping) == {}
    assert settings.principal_resolver is None
    assert settings.post_processor is None


def test_environment_overrides_defaults():
    settings = load_settings(environ=ENV, methods_applied=["GET"])

    assert settings.jwks_uri == "https://jwks.com"
    assert settings.jwt_audiences == ("testaud1", "testaud2")
    assert settings.jwt_issuer == "https://issuer.com"
    assert settings.jwt_signing_algorithms == ("RS256", "RS512")
    assert settings.custom_claim_namespace == "https://example.com/"


def test_explicit_values_override_environment():
    settings = load_settings(
        environ=ENV,
        jwks_uri="testuri",
        jwt_audiences=["testaudience"],
        jwt_issuer="testissuer",
        jwt_signing_algorithms=None,
        accepted_scopes=["scope1", "scope2"],
        path_mapping={"GET": ["this"]},
    )

    assert settings.jwks_uri == "testuri"
    assert settings.jwt_audiences == ("testaudience",)
    assert settings.jwt_issuer == "testissuer"
    # None means "not given", so the environment still applies
    assert settings.jwt_signing_algorithms == ("RS256", "RS512")
    assert settings.accepted_scopes == {"scope1", "scope2"}
    assert settings.path_mapping["GET"] == ("this",)


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("AUTHORIZER_JWKS_URI", "https://from-env.com")
    assert load_settings(methods_applied=["GET"]).jwks_uri == "https://from-env.com"


def test_requires_methods_or_mapping():
    with pytest.raises(ConfigurationError, match="Must supply either path_mapping or methods_applied"):
        load_settings(environ={})

    with pytest.raises(ConfigurationError):
        AuthorizerSettings(methods_applied=[], path_mapping={})


def test_rejects_methods_and_mapping_together():
    with pytest.raises(ConfigurationError):
        AuthorizerSettings(methods_applied=["GET"], path_mapping={"GET": ["x"]})


def test_rejects_unknown_and_invalid_settings():
    with pytest.raises(ConfigurationError, match="Unknown settings: bogus"):
        load_settings(environ={}, methods_applied=["GET"], bogus=True)

    with pytest.raises(ConfigurationError):
        AuthorizerSettings(methods_applied=["GET"], jwt_signing_algorithms=())

    with pytest.raises(ConfigurationError):
        AuthorizerSettings(methods_applied=["GET"], jwks_cache_max_entries=0)


def test_normalizes_collections():
    settings = AuthorizerSettings(
        methods_applied="GET",
        accepted_scopes="read:a",
        jwt_audiences="aud",
    )
    assert settings.methods_applied == ("GET",)
    assert settings.accepted_scopes == frozenset({"read:a"})
    assert settings.jwt_audiences == ("aud",)
    assert not settings.uses_path_mapping

    mapped = AuthorizerSettings(path_mapping={"GET": ["a", "b"], "POST": "c"})
    assert list(mapped.path_mapping) == ["GET", "POST"]
    assert mapped.path_mapping["POST"] == ("c",)
    assert mapped.uses_path_mapping

    with pytest.raises(TypeError):
        mapped.path_mapping["PUT"] = ("d",)
