"""Request identity resolution from bearer tokens."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.errors import AuthenticationError

if TYPE_CHECKING:
    from src.services.auth import TokenService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestIdentity:
    """Who is making the current request.

    ``user_id`` is None for anonymous requests. Instances are immutable and
    live only for the duration of one request.
    """

    user_id: int | None = None

    @classmethod
    def anonymous(cls) -> "RequestIdentity":
        return cls(user_id=None)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def resolve_identity(
    token: str | None,
    tokens: "TokenService",
    mandatory: bool,
) -> RequestIdentity:
    """Turn an optional bearer token into a request identity.

    In mandatory mode a missing token or a token that fails verification
    raises AuthenticationError. In optional mode both cases resolve to the
    anonymous identity.
    """
    if token is None:
        if mandatory:
            raise AuthenticationError("Access token required")
        return RequestIdentity.anonymous()

    user_id = tokens.verify(token)
    if user_id is None:
        if mandatory:
            logger.info("Rejected request with invalid or expired bearer token")
            raise AuthenticationError("Invalid or expired token")
        return RequestIdentity.anonymous()

    return RequestIdentity(user_id=user_id)
