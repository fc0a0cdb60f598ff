class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class ConfigError(DomainError):
    """Required configuration (signing secret, user directory) is missing or empty."""

    pass


class TokenError(DomainError):
    """A presented token cannot be accepted."""

    pass


class InvalidToken(TokenError):
    """Malformed token, unexpected header, bad signature or invalid claims."""

    pass


class ExpiredToken(TokenError):
    """Signature is valid but the token's expiry is not in the future."""

    pass


class AuthorizationDenied(DomainError):
    """A valid token of the wrong kind was presented (refresh used as access)."""

    pass


class InvalidCredentials(DomainError):
    """Unknown account or wrong password; the two are never distinguished."""

    pass


class InvalidCode(DomainError):
    """A verification code was expired, already used or did not match."""

    pass


class StoreUnavailable(DomainError):
    """The TTL store could not be reached or did not answer in time."""

    pass


class DeliveryFailed(DomainError):
    """The out-of-band channel refused or failed to deliver a code."""

    pass
