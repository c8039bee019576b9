"""
FastAPI Authentication Dependencies
-----------------------------------
Dependency providers that wire the auth service for each request.

The bearer token is extracted from the Authorization header and handed to
the service explicitly; there is no ambient "current user" state.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from app.auth.auth_service import AuthService
from app.auth.jwt_utils import TokenCodec
from app.auth.revocation_registry import RevocationRegistry, build_revocation_registry
from app.psql_db_services.users_service import UsersService

# OAuth2 scheme for extracting Bearer tokens from Authorization header
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/login",
    auto_error=False,  # Missing tokens are rejected by the service like any bad token
)


async def get_bearer_token(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    """Raw bearer token from the request, or None when absent."""
    return token


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    """Process-wide token codec built from settings."""
    return TokenCodec()


@lru_cache(maxsize=1)
def get_revocation_registry() -> RevocationRegistry:
    """Process-wide revocation registry; shared so revocations are visible to every request."""
    return build_revocation_registry()


def get_credential_store() -> UsersService:
    return UsersService()


def get_auth_service(
    credential_store: UsersService = Depends(get_credential_store),
    token_codec: TokenCodec = Depends(get_token_codec),
    revocation_registry: RevocationRegistry = Depends(get_revocation_registry),
) -> AuthService:
    """Auth service for a single request."""
    return AuthService(credential_store, token_codec, revocation_registry)
