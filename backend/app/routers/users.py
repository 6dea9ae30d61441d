from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, require_admin
from app.models import User
from app.schemas import (
    CurrentUserResponse,
    UpdateUserScopeRequest,
    UserResponse,
    UserScopeResponse,
    UsersListResponse,
)
from app.services.accounts import list_users, update_user_scope

router = APIRouter()


@router.get("/me", response_model=CurrentUserResponse)
def get_me(user: User = Depends(get_current_user)):
    """Get the currently authenticated user."""
    return CurrentUserResponse(user=UserResponse.model_validate(user))


@router.get("/get-all-users", response_model=UsersListResponse)
def get_all_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """List every registered user (admin only)."""
    users = list_users(db)
    return UsersListResponse(users=[UserResponse.model_validate(u) for u in users])


@router.put("/update-user-scope", response_model=UserScopeResponse)
def update_scope(
    data: UpdateUserScopeRequest,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Replace a user's scope (admin only)."""
    user = update_user_scope(db, data.user_id, data.updated_scope)
    return UserScopeResponse(flash="User scope updated successfully!", user_scope=user.scope)
