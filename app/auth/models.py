"""
JWT Authentication Models
-------------------------
Pydantic models for JWT token operations and responses.
Defines the structure for token claims, issued tokens and login responses.
"""

from pydantic import BaseModel, ConfigDict, Field


class TokenClaims(BaseModel):
    """
    Verified contents of an access token.

    Only non-sensitive data is embedded. The user record itself is loaded
    from the credential store when needed.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "subject": "550e8400-e29b-41d4-a716-446655440000",
                "token_id": "9f2c1f1b2a8e4c6f9d7a3e5b1c0d2e4f",
                "issued_at": 1760868000,
                "expires_at": 1760871600,
            }
        },
    )

    subject: str = Field(..., min_length=1, description="User id the token is bound to")
    token_id: str = Field(..., min_length=1, description="Unique token id (jti)")
    issued_at: int = Field(..., description="Issue time, epoch seconds")
    expires_at: int = Field(..., description="Expiry time, epoch seconds")


class IssuedToken(BaseModel):
    """A freshly signed token together with the claims it carries."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    claims: TokenClaims


class AuthTokenResponse(BaseModel):
    """
    Login response.

    Returned when credentials are exchanged for an access token.
    """

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(
        default="bearer", description="Token type (always 'bearer')"
    )
    expires_in: int = Field(..., description="Token lifetime in seconds")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
                "expires_in": 3600,
            }
        }
    )
