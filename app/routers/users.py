# app/routers/users.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_auth, require_admin
from app.database import get_session
from app.dependencies import get_user_service
from app.models.user import User
from app.schemas.user import (
    Role,
    UserAdminUpdate,
    UserPage,
    UserRead,
    UserRoleUpdate,
    UserUpdate,
)
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


# -------- Self profile --------


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """Return the authenticated user's profile."""
    return current_user


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    users: UserService = Depends(get_user_service),
):
    """
    Update the authenticated user's profile (partial update).

    Only names are editable.
    """
    return users.update_user(session, current_user.id, payload)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    users: UserService = Depends(get_user_service),
):
    """Delete the authenticated user's account and greetings."""
    users.delete_user(session, current_user.id)
    return None


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=UserPage,
    dependencies=[Depends(require_admin)],
)
def list_users(
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
    limit: int = Query(default=10, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    search: str = "",
    role: Role | None = None,
):
    """
    List users, newest first (admin only).

    - `search` matches first name, last name or email (case-insensitive).
    - `role` filters by exact role.
    - `next_offset` is null on the last page.
    """
    return users.get_all_users(session, limit=limit, offset=offset, search=search, role=role)


@router.get(
    "/count",
    response_model=int,
    dependencies=[Depends(require_admin)],
)
def count_users(
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    return users.get_user_count(session)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    """
    Get a specific user by id (admin only).
    """
    return users.get_user(session, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def update_user(
    user_id: uuid.UUID,
    payload: UserAdminUpdate,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    return users.update_user(session, user_id, payload)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    """
    Update a user's role (admin only).

    Allowed roles: user, admin.
    """
    return users.update_user(session, user_id, payload)


@router.post(
    "/{user_id}/revoke-token",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def revoke_token(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    """Force the user to sign in again once their access token expires."""
    users.revoke_refresh_token(session, user_id)
    return None


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_admin)],
)
def delete_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    """Delete a user (admin only)."""
    users.delete_user(session, user_id)
    return None
