"""
Auth Service
------------
Orchestrates login, identity lookup, logout and registration on top of
the credential store, token codec and revocation registry.

Per-token lifecycle: Issued -> Active -> Expired | Revoked. Expired and
Revoked are terminal.

Callers never learn why a token was rejected: expired, revoked, malformed
and unknown-user all surface as the same UnauthenticatedError. The reason
is logged for operators.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol
from uuid import UUID, uuid4

from loguru import logger

from app.auth.exceptions import (
    EmailAlreadyExistsError,
    InfrastructureError,
    InvalidTokenError,
    RevocationStoreError,
    UnauthenticatedError,
    UnauthorizedError,
)
from app.auth.jwt_utils import TokenCodec
from app.auth.models import AuthTokenResponse, TokenClaims
from app.auth.revocation_registry import RevocationRegistry
from app.utils.password_hashing import PasswordHasher

UNAUTHORIZED_MESSAGE = "Unauthorized"
UNAUTHENTICATED_MESSAGE = "Unauthenticated"
EMAIL_TAKEN_MESSAGE = "The email has already been taken."
USER_CREATED_MESSAGE = "Created!"
USER_NOT_CREATED_MESSAGE = "User not created!"


class CredentialStore(Protocol):
    """What the auth service needs from user persistence."""

    async def get_user_by_email(self, email_address: str) -> Optional[Dict[str, Any]]: ...

    async def get_user_by_id(self, user_id: UUID) -> Optional[Dict[str, Any]]: ...

    async def create_user(
        self, user_id: UUID, name: str, email: str, password_hash: str
    ) -> Dict[str, Any]: ...

    def verify_password(self, user: Dict[str, Any], plaintext_password: str) -> bool: ...


class RegistrationErrorKind(str, Enum):
    CONFLICT = "conflict"
    INFRASTRUCTURE = "infrastructure"


@dataclass
class RegistrationResult:
    """Explicit outcome of register(); ordinary failures are not raised."""

    message: str
    user: Optional[Dict[str, Any]] = None
    error_kind: Optional[RegistrationErrorKind] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error_kind is None


class AuthService:
    """Login, me, logout and register."""

    def __init__(
        self,
        credential_store: CredentialStore,
        token_codec: TokenCodec,
        revocation_registry: RevocationRegistry,
    ):
        self.credential_store = credential_store
        self.token_codec = token_codec
        self.revocation_registry = revocation_registry

    async def login(self, email: str, password: str) -> AuthTokenResponse:
        """
        Exchange credentials for an access token.

        Raises:
            UnauthorizedError: Unknown email or wrong password (same message)
            InfrastructureError: Credential store failed
        """
        try:
            user = await self.credential_store.get_user_by_email(email)
        except Exception as e:
            logger.opt(exception=e).error(f"Credential lookup failed during login: {e}")
            raise InfrastructureError("Credential store unavailable") from e

        if not user or not self.credential_store.verify_password(user, password):
            logger.info(f"Rejected login for {email}")
            raise UnauthorizedError(UNAUTHORIZED_MESSAGE)

        issued = self.token_codec.issue(user["user_id"])
        logger.info(f"User {user['user_id']} logged in")

        return AuthTokenResponse(
            access_token=issued.access_token,
            token_type="bearer",
            expires_in=self.token_codec.ttl_seconds,
        )

    async def me(self, token: Optional[str]) -> Dict[str, Any]:
        """
        Resolve a bearer token to the user it belongs to.

        Raises:
            UnauthenticatedError: Token invalid, expired, revoked, or its
                user no longer exists
        """
        claims = await self._authenticate(token)

        try:
            user = await self.credential_store.get_user_by_id(UUID(claims.subject))
        except ValueError:
            logger.warning(f"Token {claims.token_id} has a non-UUID subject")
            raise UnauthenticatedError(UNAUTHENTICATED_MESSAGE) from None
        except Exception as e:
            logger.error(f"User lookup failed for token {claims.token_id}: {e}")
            raise InfrastructureError("Credential store unavailable") from e

        if not user:
            logger.warning(f"Token {claims.token_id} refers to a missing user")
            raise UnauthenticatedError(UNAUTHENTICATED_MESSAGE)

        return user

    async def logout(self, token: Optional[str]) -> None:
        """
        Revoke a token until its natural expiry.

        Raises:
            UnauthenticatedError: Token invalid, expired or already revoked
            RevocationStoreError: The revocation could not be stored
        """
        claims = await self._authenticate(token)
        await self.revocation_registry.revoke(claims.token_id, claims.expires_at)
        logger.info(f"User {claims.subject} logged out")

    async def register(self, email: str, password: str, name: str) -> RegistrationResult:
        """
        Create a new identity. Input is expected to be schema-validated.

        Returns:
            RegistrationResult with the created user, or an error kind of
            CONFLICT (email taken) or INFRASTRUCTURE (store failure)
        """
        try:
            password_hash = PasswordHasher.hash_password(password)
            user = await self.credential_store.create_user(
                user_id=uuid4(),
                name=name,
                email=email,
                password_hash=password_hash,
            )
        except EmailAlreadyExistsError:
            logger.info(f"Registration rejected, email taken: {email}")
            return RegistrationResult(
                message=EMAIL_TAKEN_MESSAGE,
                error_kind=RegistrationErrorKind.CONFLICT,
            )
        except Exception as e:
            logger.opt(exception=e).error(f"Registration failed for {email}: {e}")
            return RegistrationResult(
                message=USER_NOT_CREATED_MESSAGE,
                error_kind=RegistrationErrorKind.INFRASTRUCTURE,
            )

        logger.info(f"User {user['user_id']} registered")
        return RegistrationResult(message=USER_CREATED_MESSAGE, user=user)

    async def _authenticate(self, token: Optional[str]) -> TokenClaims:
        """Verify a token and make sure it has not been revoked."""
        try:
            claims = self.token_codec.verify(token)
        except InvalidTokenError as e:
            logger.info(f"Token rejected ({type(e).__name__}): {e}")
            raise UnauthenticatedError(UNAUTHENTICATED_MESSAGE) from None

        try:
            revoked = await self.revocation_registry.is_revoked(claims.token_id)
        except RevocationStoreError:
            # Fail closed: without the registry a revoked token cannot be told apart
            logger.error(f"Revocation check unavailable for token {claims.token_id}")
            raise UnauthenticatedError(UNAUTHENTICATED_MESSAGE) from None

        if revoked:
            logger.info(f"Token {claims.token_id} rejected: revoked")
            raise UnauthenticatedError(UNAUTHENTICATED_MESSAGE)

        return claims
