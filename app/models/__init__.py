"""
API Models Package
------------------
Pydantic request and response models for the auth API.
"""

from app.models.request_models import LoginRequest, RegisterRequest
from app.models.response_models import (
    AuthConfigResponse,
    DependencyHealth,
    ErrorResponse,
    HealthStatus,
    MessageResponse,
    RegisterResponse,
    UserResponse,
)

__all__ = [
    # Requests
    "LoginRequest",
    "RegisterRequest",
    # Responses
    "AuthConfigResponse",
    "DependencyHealth",
    "ErrorResponse",
    "HealthStatus",
    "MessageResponse",
    "RegisterResponse",
    "UserResponse",
]
