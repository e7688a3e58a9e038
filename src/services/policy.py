"""Access-control decisions for posts and profiles.

Everything here is a pure function of the resource and the request identity;
no database access happens in this module.
"""

from enum import Enum

from src.errors import AuthenticationError, AuthorizationError
from src.models.post import Post
from src.services.identity import RequestIdentity


class Decision(str, Enum):
    """Outcome of an access-control check."""

    ALLOW = "allow"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


def can_view_post(post: Post, identity: RequestIdentity) -> Decision:
    """Published posts are public; drafts are visible to their author only."""
    if post.published or identity.user_id == post.author_id:
        return Decision.ALLOW
    return Decision.FORBIDDEN


def can_mutate_post(post: Post, identity: RequestIdentity) -> Decision:
    """Only the author may update or delete a post."""
    if identity.is_anonymous:
        return Decision.UNAUTHENTICATED
    if identity.user_id == post.author_id:
        return Decision.ALLOW
    return Decision.FORBIDDEN


def can_mutate_profile(user_id: int, identity: RequestIdentity) -> Decision:
    """Users may only change their own profile."""
    if identity.is_anonymous:
        return Decision.UNAUTHENTICATED
    if identity.user_id == user_id:
        return Decision.ALLOW
    return Decision.FORBIDDEN


def enforce(decision: Decision, detail: str = "Access denied") -> None:
    """Raise the error matching a non-allow decision."""
    if decision == Decision.UNAUTHENTICATED:
        raise AuthenticationError("Access token required")
    if decision == Decision.FORBIDDEN:
        raise AuthorizationError(detail)
