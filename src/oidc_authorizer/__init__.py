"""
oidc_authorizer

Clean-architecture OIDC bearer-token authorizer for gateway-style request
routers (e.g. API Gateway Lambda authorizers).
"""

__version__ = "0.1.0"

from .domain.constants import Effect, EventType, UNAUTHORIZED, DEFAULT_PRINCIPAL_ID
from .domain.entities import DecodedClaims, Statement, DecisionDocument, PostProcessContext
from .domain.exceptions import (
    AuthorizerError,
    ConfigurationError,
    AccessTokenError,
    MissingTokenError,
    UnsupportedSchemeError,
    UnsupportedEventTypeError,
    MalformedTokenError,
    KeyRetrievalError,
    VerificationError,
    SignatureInvalidError,
    IssuerMismatchError,
    AudienceMismatchError,
    AlgorithmMismatchError,
    TokenExpiredError,
    PolicyGenerationError,
    MissingPrincipalIdError,
    MissingEffectError,
    MissingResourceError,
    MalformedResourceError,
    HookError,
)
from .domain.value_objects import RequestEvent, TokenEvent, ResourceArn, parse_event
from .domain.ports import KeyResolver, TokenVerifier, PrincipalResolver, DecisionPostProcessor

from .config.settings import AuthorizerSettings
from .config.env import load_settings

from .application.hooks import (
    default_principal_resolver,
    default_post_processor,
    subject_principal_resolver,
)
from .application.use_cases.extract_token import extract_access_token
from .application.use_cases.decode_claims import decode_claims
from .application.use_cases.decide_scope import decide_scope
from .application.use_cases.generate_statements import generate_statements
from .application.use_cases.build_policy import build_policy
from .application.use_cases.authorize import AuthorizeRequestUseCase

from .adapters.jwks.key_resolver import JWKSKeyResolver
from .adapters.jwks.verifier import PyJWTVerifier

from .integrations.common.authorizer_factory import Authorizer, create_authorizer
from .integrations.aws_lambda.handler import create_lambda_handler

__all__ = [
    "__version__",
    # domain core
    "Effect",
    "EventType",
    "UNAUTHORIZED",
    "DEFAULT_PRINCIPAL_ID",
    "DecodedClaims",
    "Statement",
    "DecisionDocument",
    "PostProcessContext",
    "RequestEvent",
    "TokenEvent",
    "ResourceArn",
    "parse_event",
    "KeyResolver",
    "TokenVerifier",
    "PrincipalResolver",
    "DecisionPostProcessor",
    # exceptions
    "AuthorizerError",
    "ConfigurationError",
    "AccessTokenError",
    "MissingTokenError",
    "UnsupportedSchemeError",
    "UnsupportedEventTypeError",
    "MalformedTokenError",
    "KeyRetrievalError",
    "VerificationError",
    "SignatureInvalidError",
    "IssuerMismatchError",
    "AudienceMismatchError",
    "AlgorithmMismatchError",
    "TokenExpiredError",
    "PolicyGenerationError",
    "MissingPrincipalIdError",
    "MissingEffectError",
    "MissingResourceError",
    "MalformedResourceError",
    "HookError",
    # config
    "AuthorizerSettings",
    "load_settings",
    # hooks
    "default_principal_resolver",
    "default_post_processor",
    "subject_principal_resolver",
    # use cases
    "extract_access_token",
    "decode_claims",
    "decide_scope",
    "generate_statements",
    "build_policy",
    "AuthorizeRequestUseCase",
    # adapters
    "JWKSKeyResolver",
    "PyJWTVerifier",
    # integrations
    "Authorizer",
    "create_authorizer",
    "create_lambda_handler",
]
