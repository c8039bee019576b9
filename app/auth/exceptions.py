"""
Authentication Exceptions
-------------------------
Error taxonomy for token handling and the auth service.

Token failures (InvalidTokenError and subclasses) carry the precise reason
for logging. The auth service collapses them into UnauthenticatedError
before anything reaches a client.
"""


class AuthError(Exception):
    """Base class for authentication errors."""


class InvalidTokenError(AuthError):
    """Token failed verification."""


class TokenExpiredError(InvalidTokenError):
    """Token signature is intact but its expiry has passed."""


class MalformedTokenError(InvalidTokenError):
    """Token could not be decoded, has a bad signature or is missing claims."""


class UnauthorizedError(AuthError):
    """Login credentials were rejected."""


class UnauthenticatedError(AuthError):
    """A protected operation was called without a valid, unrevoked token."""


class InfrastructureError(AuthError):
    """A backing store failed. Never shown verbatim to clients."""


class RevocationStoreError(InfrastructureError):
    """The revocation registry's backing store failed."""


class EmailAlreadyExistsError(ValueError):
    """A user with this email is already registered."""
