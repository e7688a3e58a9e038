"""Pydantic schemas for API requests and responses."""

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
from src.schemas.post import (
    AuthorSummary,
    Pagination,
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "UserUpdate",
    "UserResponse",
    "ProfileResponse",
    "ProfileEnvelope",
    "AuthResponse",
    "MessageResponse",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostEnvelope",
    "PostListResponse",
    "AuthorSummary",
    "Pagination",
]
