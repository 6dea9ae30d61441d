from app.schemas.common import ErrorDescriptor, FlashResponse
from app.schemas.user import (
    RegisterRequest,
    UserResponse,
    UpdateUserScopeRequest,
    UsersListResponse,
    UserScopeResponse,
)
from app.schemas.auth import (
    LoginRequest,
    ResendVerificationRequest,
    ActionResponse,
    RegisterResponse,
    LoginResponse,
    CurrentUserResponse,
)
from app.schemas.page import (
    PageCreate,
    PageUpdate,
    PageDelete,
    PageReorderRequest,
    PageResponse,
    PageDataResponse,
    PagesListResponse,
)

__all__ = [
    "ErrorDescriptor",
    "FlashResponse",
    "RegisterRequest",
    "UserResponse",
    "UpdateUserScopeRequest",
    "UsersListResponse",
    "UserScopeResponse",
    "LoginRequest",
    "ResendVerificationRequest",
    "ActionResponse",
    "RegisterResponse",
    "LoginResponse",
    "CurrentUserResponse",
    "PageCreate",
    "PageUpdate",
    "PageDelete",
    "PageReorderRequest",
    "PageResponse",
    "PageDataResponse",
    "PagesListResponse",
]
