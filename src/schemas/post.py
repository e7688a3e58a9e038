"""Post schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50000)]


class PostCreate(BaseModel):
    """Create a new post."""

    title: Title
    content: Content
    published: bool = False


class PostUpdate(BaseModel):
    """Update a post. The author cannot be changed."""

    title: Title | None = None
    content: Content | None = None
    published: bool | None = None


class AuthorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    published: bool
    author_id: int
    author: AuthorSummary
    created_at: datetime
    updated_at: datetime


class PostEnvelope(BaseModel):
    message: str | None = None
    post: PostResponse


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PostListResponse(BaseModel):
    """A page of posts."""

    posts: list[PostResponse]
    pagination: Pagination
