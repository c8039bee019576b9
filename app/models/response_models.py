"""
Response Models
--------------
Pydantic models for API response validation.
Simple, focused schemas for returning data to clients.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict


# ============================================================================
# USER RESPONSE MODEL
# ============================================================================
class UserResponse(BaseModel):
    """Response schema for user data - no sensitive info"""

    user_id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "jeferson",
                "email": "jeferson@email.com",
                "created_at": "2025-10-18T08:00:00Z",
                "updated_at": "2025-10-18T08:00:00Z",
            }
        }
    )


class RegisterResponse(BaseModel):
    """Outcome of a registration attempt."""

    error: bool = Field(..., description="True when the user was not created")
    user: Optional[UserResponse] = Field(default=None, description="Created user")
    message: str = Field(..., description="Human readable outcome")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": False,
                "user": UserResponse.model_config["json_schema_extra"]["example"],
                "message": "Created!",
            }
        }
    )


class MessageResponse(BaseModel):
    """Plain message body (logout, 401 responses)."""

    message: str

    model_config = ConfigDict(
        json_schema_extra={"example": {"message": "Successfully logged out"}}
    )


class ErrorResponse(BaseModel):
    """Error body returned by the login endpoint."""

    error: str

    model_config = ConfigDict(json_schema_extra={"example": {"error": "Unauthorized"}})


class AuthConfigResponse(BaseModel):
    """Public token settings. Never includes key material."""

    jwt_algorithm: str
    access_token_expire_seconds: int
    token_type: str = "bearer"
    revocation_backend: str


# ============================================================================
# HEALTH RESPONSE MODELS
# ============================================================================
class HealthStatus(BaseModel):
    """
    Health check response schema.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-10-13T10:30:00Z",
                "version": "1.0.0",
            }
        }
    )

    status: str = Field(..., description="Auth service health status")
    timestamp: datetime = Field(..., description="Time of the check")
    version: str = Field(..., description="Application version")


class DependencyHealth(BaseModel):
    """
    Dependency health response model.

    PostgreSQL always backs the credential store. Redis is only reported
    when it backs the revocation registry; otherwise it is null.
    """

    postgresql: bool = Field(..., description="PostgreSQL database health status")
    redis: Optional[bool] = Field(
        default=None, description="Redis health status (null when not in use)"
    )
    status: str = Field(..., description="Overall status: healthy or unhealthy")
    timestamp: datetime = Field(..., description="Time of the check")
