class AuthorizerError(Exception):
    """Base class for every error raised by the authorizer."""
    pass


class ConfigurationError(AuthorizerError):
    """Raised when the authorizer is constructed with invalid settings."""
    pass


# --- Token extraction ------------------------------------------------------


class AccessTokenError(AuthorizerError):
    """Raised when no usable access token can be read from an event."""
    pass


class MissingTokenError(AccessTokenError):
    """Raised when the event carries no access token."""
    pass


class UnsupportedSchemeError(AccessTokenError):
    """Raised when the authorization value is not a bearer token."""
    pass


class UnsupportedEventTypeError(AccessTokenError):
    """Raised when the event type is neither REQUEST nor TOKEN."""
    pass


# --- Token decoding / verification ----------------------------------------


class MalformedTokenError(AuthorizerError):
    """Raised when a token cannot be decoded into header and claims."""
    pass


class KeyRetrievalError(AuthorizerError):
    """Raised when the signing key for a token cannot be resolved."""
    pass


class VerificationError(AuthorizerError):
    """Raised when a token fails signature or claim validation."""
    pass


class SignatureInvalidError(VerificationError):
    pass


class IssuerMismatchError(VerificationError):
    pass


class AudienceMismatchError(VerificationError):
    pass


class AlgorithmMismatchError(VerificationError):
    pass


class TokenExpiredError(VerificationError):
    """Raised when token has expired."""
    pass


# --- Policy generation -----------------------------------------------------


class PolicyGenerationError(AuthorizerError):
    """Raised when a decision document cannot be generated."""
    pass


class MissingPrincipalIdError(PolicyGenerationError):
    pass


class MissingEffectError(PolicyGenerationError):
    pass


class MissingResourceError(PolicyGenerationError):
    pass


class MalformedResourceError(PolicyGenerationError):
    """Raised when a resource ARN does not have the expected six fields."""
    pass


class HookError(AuthorizerError):
    """Raised when a principal resolver or post-processor hook fails."""
    pass
