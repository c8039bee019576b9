"""
JWT Utilities
-------------
Token codec: issues signed, expiring access tokens and verifies them.

- Signing and signature checks use python-jose
- Expiry is checked here against the codec's own clock, so a token is
  expired exactly when now >= exp
- Revocation is not checked here; see revocation_registry
"""

from datetime import datetime, timezone
from typing import Callable, Optional, Union
from uuid import UUID, uuid4

from jose import jwt
from jose.exceptions import JOSEError
from loguru import logger
from pydantic import ValidationError

from app.auth.exceptions import MalformedTokenError, TokenExpiredError
from app.auth.models import IssuedToken, TokenClaims
from app.core.config_manager import settings


def utc_now_seconds() -> int:
    """Current UTC time as whole epoch seconds."""
    return int(datetime.now(timezone.utc).timestamp())


class TokenCodec:
    """Issues and verifies access tokens bound to a user identity."""

    def __init__(
        self,
        signing_key: Optional[str] = None,
        verification_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        issuer: Optional[str] = None,
        clock: Callable[[], int] = utc_now_seconds,
    ):
        """
        Create a codec. Every argument left as None falls back to settings.

        Args:
            signing_key: Secret (HMAC) or PEM private key (RSA/EC)
            verification_key: Secret (HMAC) or PEM public key (RSA/EC)
            algorithm: JWS algorithm, e.g. HS256
            ttl_seconds: Fixed token lifetime applied at issuance
            issuer: Value for the 'iss' claim; also required on verify
            clock: Returns the current time in epoch seconds
        """
        self.algorithm = algorithm or settings.jwt_algorithm
        self._signing_key = signing_key or settings.jwt_signing_key
        self._verification_key = (
            verification_key or signing_key or settings.jwt_verification_key
        )
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.jwt_ttl_seconds
        self.issuer = issuer if issuer is not None else settings.jwt_issuer
        self._clock = clock

        if self.ttl_seconds <= 0:
            raise ValueError("Token TTL must be positive")

    def issue(self, subject: Union[UUID, str]) -> IssuedToken:
        """
        Sign a new access token for a user.

        Args:
            subject: The user's id

        Returns:
            IssuedToken: compact JWS string plus its claims

        Raises:
            ValueError: If subject is empty
            JOSEError: If signing fails (bad key material)
        """
        subject = str(subject) if subject is not None else ""
        if not subject:
            raise ValueError("Token subject cannot be empty")

        issued_at = self._clock()
        claims = TokenClaims(
            subject=subject,
            token_id=uuid4().hex,
            issued_at=issued_at,
            expires_at=issued_at + self.ttl_seconds,
        )

        payload = {
            "sub": claims.subject,
            "jti": claims.token_id,
            "iat": claims.issued_at,
            "exp": claims.expires_at,
        }
        if self.issuer:
            payload["iss"] = self.issuer

        try:
            token: str = jwt.encode(payload, self._signing_key, algorithm=self.algorithm)
        except JOSEError as e:
            logger.error(f"Failed to sign access token: {e}")
            raise

        logger.debug(f"Access token {claims.token_id} issued for user {subject}")
        return IssuedToken(access_token=token, claims=claims)

    def verify(self, token: Optional[str]) -> TokenClaims:
        """
        Decode a token and check its signature, structure and expiry.

        Args:
            token: Compact JWS string

        Returns:
            TokenClaims: the verified claims

        Raises:
            MalformedTokenError: Undecodable, badly signed or incomplete token
            TokenExpiredError: Token is intact but now >= its expiry
        """
        if not token or not isinstance(token, str):
            raise MalformedTokenError("Token is missing")

        try:
            payload = jwt.decode(
                token,
                self._verification_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={
                    "verify_exp": False,
                    "require_exp": True,
                    "require_iat": True,
                    "require_sub": True,
                    "require_jti": True,
                    "require_iss": bool(self.issuer),
                },
            )
        except JOSEError as e:
            raise MalformedTokenError(f"Token could not be decoded: {e}") from e

        try:
            claims = TokenClaims(
                subject=payload["sub"],
                token_id=payload["jti"],
                issued_at=payload["iat"],
                expires_at=payload["exp"],
            )
        except (KeyError, ValidationError) as e:
            raise MalformedTokenError(f"Token claims are invalid: {e}") from e

        if self._clock() >= claims.expires_at:
            raise TokenExpiredError(f"Token {claims.token_id} expired at {claims.expires_at}")

        return claims
