# app/routers/posts.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import get_current_user, require_admin, require_auth, require_confirmed
from app.database import get_session
from app.dependencies import get_post_service
from app.models.user import User
from app.schemas.post import PostCreate, PostModeration, PostPage, PostRead, PostStatus
from app.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


# -------- Public / user-facing endpoints --------


@router.get("", response_model=PostPage)
def list_posts(
    session: Session = Depends(get_session),
    posts: PostService = Depends(get_post_service),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """
    List approved greetings, newest first.

    - Public endpoint.
    """
    return posts.list_public_posts(session, limit=limit, offset=offset)


@router.get("/me", response_model=PostPage)
def list_my_posts(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    posts: PostService = Depends(get_post_service),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """List the authenticated user's greetings in every status."""
    return posts.list_user_posts(session, current_user.id, limit=limit, offset=offset)


@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_confirmed),
    posts: PostService = Depends(get_post_service),
):
    """
    Submit a greeting with media already uploaded through /upload.

    Auth:
      - Requires a confirmed email.
    The post starts in "processing" until an admin reviews it.
    """
    return posts.create_post(session, current_user, payload)


# -------- Admin endpoints --------
# Declared before "/{post_id}" so "review" is not parsed as an id.


@router.get(
    "/review",
    response_model=PostPage,
    dependencies=[Depends(require_admin)],
)
def list_posts_for_review(
    session: Session = Depends(get_session),
    posts: PostService = Depends(get_post_service),
    post_status: PostStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
):
    """List greetings in any status for moderation (admin only)."""
    return posts.list_posts_for_review(session, status=post_status, limit=limit, offset=offset)


@router.patch(
    "/{post_id}/moderation",
    response_model=PostRead,
    dependencies=[Depends(require_admin)],
)
def moderate_post(
    post_id: uuid.UUID,
    payload: PostModeration,
    session: Session = Depends(get_session),
    posts: PostService = Depends(get_post_service),
):
    """Approve / reject a greeting and optionally score it (admin only)."""
    return posts.moderate_post(session, post_id, payload)


# -------- Single post --------


@router.get("/{post_id}", response_model=PostRead)
def get_post(
    post_id: uuid.UUID,
    session: Session = Depends(get_session),
    viewer: User | None = Depends(get_current_user),
    posts: PostService = Depends(get_post_service),
):
    """
    Get one greeting. Unapproved greetings are only visible to their
    author and admins.
    """
    return posts.get_visible_post(session, post_id, viewer)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    posts: PostService = Depends(get_post_service),
):
    """Delete a greeting (its author or an admin)."""
    posts.delete_post(session, post_id, current_user)
    return None
