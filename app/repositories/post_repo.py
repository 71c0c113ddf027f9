# app/repositories/post_repo.py
import uuid

from sqlmodel import Session, col, func, select

from app.models.post import Post


class PostRepository:
    """
    Data access layer for greeting posts.
    """

    def get_by_id(self, session: Session, post_id: uuid.UUID) -> Post | None:
        return session.get(Post, post_id)

    def list_page(
        self,
        session: Session,
        *,
        limit: int,
        offset: int,
        status: str | None = None,
        user_id: uuid.UUID | None = None,
    ) -> tuple[list[Post], int]:
        """
        Newest-first page of posts, optionally filtered by status and author.

        Returns:
            (rows, total matching rows)
        """
        conditions = []
        if status:
            conditions.append(Post.status == status)
        if user_id is not None:
            conditions.append(Post.user_id == user_id)

        total = session.exec(
            select(func.count()).select_from(Post).where(*conditions)
        ).one()
        stmt = (
            select(Post)
            .where(*conditions)
            .order_by(col(Post.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return list(session.exec(stmt).all()), total

    def create(self, session: Session, post: Post) -> Post:
        session.add(post)
        session.commit()
        session.refresh(post)
        return post

    def update(self, session: Session, post: Post) -> Post:
        session.add(post)
        session.commit()
        session.refresh(post)
        return post

    def delete(self, session: Session, post: Post) -> None:
        session.delete(post)
        session.commit()
