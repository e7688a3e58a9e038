"""Post API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from src.api.dependencies import get_post_service, optional_identity, require_identity
from src.schemas.auth import MessageResponse
from src.schemas.post import (
    Pagination,
    PostCreate,
    PostEnvelope,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from src.services.identity import RequestIdentity
from src.services.posts import Page, PostService

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])

# Ids are 32-bit integer columns
MAX_ID = 2**31 - 1
MAX_LIMIT = 100
# Keeps (page - 1) * limit inside a 32-bit offset
MAX_PAGE = MAX_ID // MAX_LIMIT

PageParam = Annotated[int, Query(ge=1, le=MAX_PAGE)]
LimitParam = Annotated[int, Query(ge=1, le=MAX_LIMIT)]
AuthorIdParam = Annotated[int | None, Query(ge=1, le=MAX_ID)]
PostIdParam = Annotated[int, Path(ge=1, le=MAX_ID)]


def _page_response(page: Page) -> PostListResponse:
    return PostListResponse(
        posts=[PostResponse.model_validate(post) for post in page.items],
        pagination=Pagination(
            page=page.page,
            limit=page.limit,
            total=page.total,
            pages=page.pages,
        ),
    )


@router.get("", response_model=PostListResponse)
async def list_posts(
    identity: Annotated[RequestIdentity, Depends(optional_identity)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    page: PageParam = 1,
    limit: LimitParam = 10,
    author_id: AuthorIdParam = None,
):
    """Get published posts, newest first."""
    return _page_response(post_service.list_published(page=page, limit=limit, author_id=author_id))


@router.get("/my-posts", response_model=PostListResponse)
async def list_my_posts(
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    post_service: Annotated[PostService, Depends(get_post_service)],
    page: PageParam = 1,
    limit: LimitParam = 10,
):
    """Get the current user's posts, drafts included."""
    return _page_response(post_service.list_by_author(identity, page=page, limit=limit))


@router.get("/{post_id}", response_model=PostEnvelope)
async def get_post(
    post_id: PostIdParam,
    identity: Annotated[RequestIdentity, Depends(optional_identity)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Get a single post. Drafts are only visible to their author."""
    post = post_service.get_post(post_id, identity)
    return PostEnvelope(post=PostResponse.model_validate(post))


@router.post("", response_model=PostEnvelope, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Create a new post."""
    post = post_service.create_post(
        identity,
        title=post_data.title,
        content=post_data.content,
        published=post_data.published,
    )
    return PostEnvelope(message="Post created successfully", post=PostResponse.model_validate(post))


@router.put("/{post_id}", response_model=PostEnvelope)
async def update_post(
    post_id: PostIdParam,
    post_data: PostUpdate,
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Update a post (author only)."""
    post = post_service.update_post(post_id, identity, post_data.model_dump(exclude_unset=True))
    return PostEnvelope(message="Post updated successfully", post=PostResponse.model_validate(post))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: PostIdParam,
    identity: Annotated[RequestIdentity, Depends(require_identity)],
    post_service: Annotated[PostService, Depends(get_post_service)],
):
    """Delete a post (author only)."""
    post_service.delete_post(post_id, identity)
    return MessageResponse(message="Post deleted successfully")
