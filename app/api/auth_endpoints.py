"""
JWT Authentication Endpoints
----------------------------
Register, login, "who am I" and logout.

Protected routes (/me, /logout) read the bearer token from the
Authorization header and pass it to the auth service. Every token
failure is answered with the same 401 body.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.auth.auth_service import AuthService, RegistrationErrorKind
from app.auth.dependencies import (
    get_auth_service,
    get_bearer_token,
    get_revocation_registry,
    get_token_codec,
)
from app.auth.exceptions import (
    InfrastructureError,
    UnauthenticatedError,
    UnauthorizedError,
)
from app.auth.jwt_utils import TokenCodec
from app.auth.models import AuthTokenResponse
from app.auth.revocation_registry import RedisRevocationRegistry, RevocationRegistry
from app.models.request_models import LoginRequest, RegisterRequest
from app.models.response_models import (
    AuthConfigResponse,
    ErrorResponse,
    MessageResponse,
    RegisterResponse,
    UserResponse,
)

# ============================================================================
# ROUTER INITIALIZATION
# ============================================================================

router = APIRouter(prefix="/api", tags=["JWT Authentication"])

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _unauthenticated_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": "Unauthenticated"},
        headers=BEARER_CHALLENGE,
    )


# ============================================================================
# AUTHENTICATION ENDPOINTS
# ============================================================================


@router.post(
    "/login",
    response_model=AuthTokenResponse,
    responses={401: {"model": ErrorResponse, "description": "Incorrect credentials"}},
    summary="Get an authentication token",
    description="""
    Exchange email and password for a bearer token.
    Use the token on protected endpoints via the Authorization header.
    """,
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate user with email and password and return a JWT access token.

    Raises:
        401: If credentials are wrong (same body for unknown email or bad password)
        500: If the credential store is unavailable
    """
    logger.info(f"Login attempt for user: {request.email}")

    try:
        return await auth_service.login(request.email, request.password)
    except UnauthorizedError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized"},
            headers=BEARER_CHALLENGE,
        )
    except InfrastructureError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Authentication failed"},
        )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": RegisterResponse, "description": "Email already registered"}
    },
    summary="Create a new user",
    description=(
        "Register a user account with name, email and password. "
        "An email that is already registered answers 409 Conflict with "
        "`{\"error\": true, \"message\": \"The email has already been taken.\"}`, "
        "not 200 with an error flag."
    ),
)
async def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Create a new user.

    Process:
    1. Validate input (handled by Pydantic)
    2. Hash password and insert the user
    3. Return the user without its password hash

    Raises:
        409: If the email is already registered
        500: On internal server error
    """
    logger.info(f"Registering user: email={request.email}")

    result = await auth_service.register(request.email, request.password, request.name)

    if result.ok:
        return RegisterResponse(
            error=False, user=UserResponse(**result.user), message=result.message
        )

    status_code = (
        status.HTTP_409_CONFLICT
        if result.error_kind == RegistrationErrorKind.CONFLICT
        else status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "message": result.message},
    )


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"model": MessageResponse, "description": "Unauthenticated"}},
    summary="Details of the logged in user",
    description="Return the user the bearer token belongs to.",
)
async def me(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Return the authenticated user's details."""
    try:
        user = await auth_service.me(token)
    except UnauthenticatedError:
        return _unauthenticated_response()
    except InfrastructureError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server Error"},
        )

    return UserResponse(**user)


@router.get(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"model": MessageResponse, "description": "Unauthenticated"}},
    summary="Revoke the current token",
    description="Log out by revoking the presented bearer token until it expires.",
)
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Revoke the presented token."""
    try:
        await auth_service.logout(token)
    except UnauthenticatedError:
        return _unauthenticated_response()
    except InfrastructureError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server Error"},
        )

    return MessageResponse(message="Successfully logged out")


# ============================================================================
# CONFIGURATION ENDPOINTS
# ============================================================================


@router.get(
    "/auth/config",
    response_model=AuthConfigResponse,
    summary="Get authentication configuration",
    description="Token algorithm, lifetime and revocation backend. No key material.",
)
async def get_auth_config(
    token_codec: TokenCodec = Depends(get_token_codec),
    revocation_registry: RevocationRegistry = Depends(get_revocation_registry),
):
    backend = (
        "redis" if isinstance(revocation_registry, RedisRevocationRegistry) else "memory"
    )
    return AuthConfigResponse(
        jwt_algorithm=token_codec.algorithm,
        access_token_expire_seconds=token_codec.ttl_seconds,
        token_type="bearer",
        revocation_backend=backend,
    )
