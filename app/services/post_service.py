# app/services/post_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from app.models.post import Post
from app.models.user import User
from app.repositories.post_repo import PostRepository
from app.schemas.post import PostCreate, PostModeration, PostPage, PostRead

logger = logging.getLogger(__name__)


class PostService:
    """
    Business logic for greeting posts.

    Responsibilities:
      - create posts (always start in "processing")
      - public / own / moderation listings
      - moderation (status + score) and deletion rules
    """

    def __init__(self, repo: PostRepository):
        self.repo = repo

    def _page(
        self,
        session: Session,
        limit: int,
        offset: int,
        **filters,
    ) -> PostPage:
        rows, total = self.repo.list_page(session, limit=limit, offset=offset, **filters)
        return PostPage(
            posts=[PostRead.model_validate(row) for row in rows],
            total_count=total,
            next_offset=offset + limit if offset + len(rows) < total else None,
        )

    def create_post(self, session: Session, author: User, payload: PostCreate) -> Post:
        post = Post(
            user_id=author.id,
            body=payload.body,
            media=[item.model_dump() for item in payload.media],
        )
        post = self.repo.create(session, post)
        logger.info("User %s submitted post %s", author.id, post.id)
        return post

    def get_post(self, session: Session, post_id: uuid.UUID) -> Post:
        post = self.repo.get_by_id(session, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def get_visible_post(self, session: Session, post_id: uuid.UUID, viewer: User | None) -> Post:
        """
        Approved posts are public; others are visible to their author and
        admins only (404 for everyone else).
        """
        post = self.get_post(session, post_id)
        if post.status == "approved":
            return post
        if viewer is not None and (viewer.role == "admin" or viewer.id == post.user_id):
            return post
        raise NotFoundError("Post not found")

    def list_public_posts(self, session: Session, limit: int = 10, offset: int = 0) -> PostPage:
        return self._page(session, limit, offset, status="approved")

    def list_user_posts(
        self,
        session: Session,
        user_id: uuid.UUID,
        limit: int = 10,
        offset: int = 0,
    ) -> PostPage:
        return self._page(session, limit, offset, user_id=user_id)

    def list_posts_for_review(
        self,
        session: Session,
        status: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> PostPage:
        return self._page(session, limit, offset, status=status)

    def moderate_post(
        self,
        session: Session,
        post_id: uuid.UUID,
        payload: PostModeration,
    ) -> Post:
        """Admin sets status and/or score."""
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("Nothing to update: provide status and/or score")

        post = self.get_post(session, post_id)
        for field, value in changes.items():
            setattr(post, field, value)
        post = self.repo.update(session, post)
        logger.info("Post %s moderated: %s", post.id, changes)
        return post

    def delete_post(self, session: Session, post_id: uuid.UUID, requester: User) -> None:
        """Authors can delete their own posts; admins can delete any."""
        post = self.get_post(session, post_id)
        if requester.role != "admin" and post.user_id != requester.id:
            raise ForbiddenError("You can only delete your own posts")
        self.repo.delete(session, post)
