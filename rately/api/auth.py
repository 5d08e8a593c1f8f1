"""Registration, login and self-service profile endpoints."""

import logging

from fastapi import APIRouter, status

from rately.api.deps import AuthenticatedUser, DbSession
from rately.core.security import create_access_token
from rately.schemas.auth import (
    AuthResponse,
    LoginRequest,
    PasswordUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)
from rately.schemas.base import MessageResponse
from rately.schemas.user import UserOut, UserResponse
from rately.services import users as user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: DbSession) -> AuthResponse:
    """Create a normal_user account and return a token for it."""
    user = user_service.register_user(db, body)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(sub=user.id, role=user.role.value),
        user=UserOut.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: DbSession) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = user_service.authenticate(db, body.email, body.password)
    logger.info("User logged in", extra={"user_id": user.id})
    return AuthResponse(
        message="Login successful",
        token=create_access_token(sub=user.id, role=user.role.value),
        user=UserOut.model_validate(user),
    )


@router.get("/profile", response_model=UserResponse, response_model_exclude_none=True)
def get_profile(current_user: AuthenticatedUser, db: DbSession) -> UserResponse:
    user = user_service.get_user(db, current_user.id)
    return UserResponse(user=UserOut.model_validate(user))


@router.put("/profile", response_model=UserResponse)
def update_profile(
    body: ProfileUpdateRequest,
    current_user: AuthenticatedUser,
    db: DbSession,
) -> UserResponse:
    user = user_service.update_profile(db, current_user.id, body)
    return UserResponse(message="Profile updated successfully", user=UserOut.model_validate(user))


@router.put("/password", response_model=MessageResponse)
def update_password(
    body: PasswordUpdateRequest,
    current_user: AuthenticatedUser,
    db: DbSession,
) -> MessageResponse:
    user_service.change_password(db, current_user.id, body)
    return MessageResponse(message="Password updated successfully")


@router.post("/logout", response_model=MessageResponse)
def logout(current_user: AuthenticatedUser) -> MessageResponse:
    """Tokens are stateless; the client discards its copy."""
    logger.info("User logged out", extra={"user_id": current_user.id})
    return MessageResponse(message="Logged out successfully")
