"""Error kinds raised by services and rendered by the API layer."""

from fastapi import status


class BlogError(Exception):
    """Base class for every error a service may raise toward a client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(BlogError):
    """Caller input is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"

    def __init__(self, detail: str | None = None, errors: list[str] | None = None):
        super().__init__(detail)
        self.errors = errors or []


class AuthenticationError(BlogError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"
    headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(BlogError):
    """Valid identity without the rights for the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Access denied"


class NotFoundError(BlogError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(BlogError):
    """A unique key is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class StoreError(BlogError):
    """The data store failed; clients only see a generic message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
