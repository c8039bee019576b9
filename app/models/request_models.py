"""
Authentication Request Models
=============================

Pydantic request models validated before any auth service call.
Malformed input never reaches the service layer; FastAPI answers it
with a 422.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.utils.password_hashing import BCRYPT_MAX_PASSWORD_BYTES


class LoginRequest(BaseModel):
    """Credentials exchanged for an access token."""

    email: EmailStr = Field(..., description="Registered email address")
    password: str = Field(..., min_length=1, description="Account password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"email": "jeferson@email.com", "password": "password"}
        }
    )


class RegisterRequest(BaseModel):
    """Request model for creating a new account."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be blank")
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(
                f"Password may not be greater than {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "jeferson",
                "email": "jeferson@email.com",
                "password": "password",
            }
        }
    )
