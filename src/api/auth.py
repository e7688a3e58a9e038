"""Authentication and profile API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool

from src.api.dependencies import get_auth_service, require_identity
from src.schemas.auth import (
    AuthResponse,
    MessageResponse,
    ProfileEnvelope,
    ProfileResponse,
    UserLogin,
    UserResponse,
    UserSignup,
    UserUpdate,
)
from src.services.auth import AuthService
from src.services.identity import RequestIdentity

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user."""
    # bcrypt is CPU bound; keep it off the event loop
    user, access_token = await run_in_threadpool(
        auth_service.signup, user_data.email, user_data.name, user_data.password
    )

    return AuthResponse(
        message="User created successfully",
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    user, access_token = await run_in_threadpool(
        auth_service.login, credentials.email, credentials.password
    )

    return AuthResponse(
        message="Login successful",
        access_token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.get("/profile", response_model=ProfileEnvelope)
async def get_profile(
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get the current user's profile with their post count."""
    user, post_count = auth_service.get_profile(identity.user_id)

    profile = ProfileResponse.model_validate(user)
    profile.post_count = post_count
    return ProfileEnvelope(user=profile)


@router.put("/profile", response_model=ProfileEnvelope)
async def update_profile(
    update: UserUpdate,
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update the current user's name and/or email."""
    user = auth_service.update_profile(
        identity, identity.user_id, name=update.name, email=update.email
    )
    profile = ProfileResponse.model_validate(user)
    profile.post_count = auth_service.count_posts_by_author(user.id)
    return ProfileEnvelope(message="Profile updated successfully", user=profile)


@router.delete("/profile", response_model=MessageResponse)
async def delete_profile(
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Delete the current user's account and all of their posts."""
    auth_service.delete_account(identity, identity.user_id)
    return MessageResponse(message="User account deleted successfully")
