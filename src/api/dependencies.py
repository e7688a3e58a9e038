"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import Settings
from src.database import get_db
from src.services.auth import AuthService, CredentialHasher, TokenService
from src.services.identity import RequestIdentity, resolve_identity
from src.services.posts import PostService

# auto_error=False so a missing header becomes our own 401 instead of FastAPI's
security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    """Token service created at startup."""
    return request.app.state.token_service


def get_credential_hasher(request: Request) -> CredentialHasher:
    """Credential hasher created at startup."""
    return request.app.state.credential_hasher


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is None:
        return None
    return credentials.credentials or None


def require_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> RequestIdentity:
    """Identity of an authenticated caller; rejects with 401 otherwise."""
    return resolve_identity(_bearer_token(credentials), tokens, mandatory=True)


def optional_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> RequestIdentity:
    """Identity of the caller, or anonymous when the token is absent or invalid."""
    return resolve_identity(_bearer_token(credentials), tokens, mandatory=False)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Get auth service with dependencies."""
    return AuthService(db, hasher, tokens)


def get_post_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PostService:
    """Get post service with dependencies."""
    return PostService(db, mask_unpublished=settings.mask_unpublished_posts)
