"""
JWT Authentication Module
-------------------------
Token issuance, verification and revocation for the auth API.

Core Components:
- jwt_utils: TokenCodec (sign / verify access tokens)
- revocation_registry: revoked token ids kept until natural expiry
- auth_service: login, me, logout, register
- dependencies: FastAPI providers (imported directly, not re-exported here,
  since they depend on the database layer)

Security Features:
- Signature, structure and expiry checked on every protected call
- Revocation checked after verification; logout revokes the presented token
- Uniform failure messages: clients cannot tell expired from revoked

Usage:
    from app.auth import AuthService, TokenCodec, InMemoryRevocationRegistry

    service = AuthService(store, TokenCodec(), InMemoryRevocationRegistry())
    tokens = await service.login("a@b.com", "pw1")
"""

from app.auth.exceptions import (
    AuthError,
    EmailAlreadyExistsError,
    InfrastructureError,
    InvalidTokenError,
    MalformedTokenError,
    RevocationStoreError,
    TokenExpiredError,
    UnauthenticatedError,
    UnauthorizedError,
)
from app.auth.models import AuthTokenResponse, IssuedToken, TokenClaims
from app.auth.jwt_utils import TokenCodec
from app.auth.revocation_registry import (
    InMemoryRevocationRegistry,
    RedisRevocationRegistry,
    RevocationRegistry,
    build_revocation_registry,
)
from app.auth.auth_service import (
    AuthService,
    CredentialStore,
    RegistrationErrorKind,
    RegistrationResult,
)

__all__ = [
    # Exceptions
    "AuthError",
    "EmailAlreadyExistsError",
    "InfrastructureError",
    "InvalidTokenError",
    "MalformedTokenError",
    "RevocationStoreError",
    "TokenExpiredError",
    "UnauthenticatedError",
    "UnauthorizedError",
    # Models
    "AuthTokenResponse",
    "IssuedToken",
    "TokenClaims",
    # Token codec
    "TokenCodec",
    # Revocation
    "InMemoryRevocationRegistry",
    "RedisRevocationRegistry",
    "RevocationRegistry",
    "build_revocation_registry",
    # Service
    "AuthService",
    "CredentialStore",
    "RegistrationErrorKind",
    "RegistrationResult",
]
