"""Post service: queries and mutations gated by the access-control policy."""

import logging
import math
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Query, Session, joinedload

from src.errors import NotFoundError
from src.models.post import Post
from src.services.identity import RequestIdentity
from src.services.policy import Decision, can_mutate_post, can_view_post, enforce

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    """A slice of posts plus the numbers needed to page through the rest."""

    items: list[Post]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @staticmethod
    def offset(page: int, limit: int) -> int:
        return (page - 1) * limit


class PostService:
    """Service for post-related operations."""

    def __init__(self, db: Session, mask_unpublished: bool = False):
        self.db = db
        # Report drafts as missing instead of forbidden to non-owners
        self.mask_unpublished = mask_unpublished

    def _paginate(self, query: Query, page: int, limit: int) -> Page:
        total = query.count()
        items = (
            query.options(joinedload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(Page.offset(page, limit))
            .limit(limit)
            .all()
        )
        return Page(items=items, page=page, limit=limit, total=total)

    def find_post_by_id(self, post_id: int) -> Post | None:
        return (
            self.db.query(Post)
            .options(joinedload(Post.author))
            .filter(Post.id == post_id)
            .first()
        )

    def _get_or_404(self, post_id: int) -> Post:
        post = self.find_post_by_id(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def list_published(self, page: int = 1, limit: int = 10, author_id: int | None = None) -> Page:
        """Published posts, newest first, optionally for one author."""
        query = self.db.query(Post).filter(Post.published.is_(True))
        if author_id is not None:
            query = query.filter(Post.author_id == author_id)
        return self._paginate(query, page, limit)

    def list_by_author(self, identity: RequestIdentity, page: int = 1, limit: int = 10) -> Page:
        """All posts of the requester, drafts included."""
        if identity.is_anonymous:
            enforce(Decision.UNAUTHENTICATED)
        query = self.db.query(Post).filter(Post.author_id == identity.user_id)
        return self._paginate(query, page, limit)

    def get_post(self, post_id: int, identity: RequestIdentity) -> Post:
        """Fetch a post the requester is allowed to see."""
        post = self._get_or_404(post_id)
        decision = can_view_post(post, identity)
        if decision != Decision.ALLOW and self.mask_unpublished:
            raise NotFoundError("Post not found")
        enforce(decision)
        return post

    def create_post(
        self,
        identity: RequestIdentity,
        title: str,
        content: str,
        published: bool = False,
    ) -> Post:
        """Create a post authored by the requester."""
        if identity.is_anonymous:
            enforce(Decision.UNAUTHENTICATED)
        post = Post(
            title=title.strip(),
            content=content.strip(),
            published=published,
            author_id=identity.user_id,
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"User {identity.user_id} created post {post.id}")
        return post

    def update_post(self, post_id: int, identity: RequestIdentity, changes: dict[str, Any]) -> Post:
        """Apply title/content/published changes; author_id never changes."""
        post = self._get_or_404(post_id)
        self._check_owner(post, identity)

        if changes.get("title") is not None:
            post.title = changes["title"].strip()
        if changes.get("content") is not None:
            post.content = changes["content"].strip()
        if changes.get("published") is not None:
            post.published = changes["published"]

        self.db.commit()
        self.db.refresh(post)
        return post

    def delete_post(self, post_id: int, identity: RequestIdentity) -> None:
        post = self._get_or_404(post_id)
        self._check_owner(post, identity)
        self.db.delete(post)
        self.db.commit()
        logger.info(f"User {identity.user_id} deleted post {post_id}")

    def _check_owner(self, post: Post, identity: RequestIdentity) -> None:
        decision = can_mutate_post(post, identity)
        if decision == Decision.FORBIDDEN:
            logger.info(f"User {identity.user_id} denied write access to post {post.id}")
        enforce(decision)
