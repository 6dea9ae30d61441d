from pydantic import BaseModel, EmailStr

from app.schemas.common import FlashResponse
from app.schemas.user import UserResponse


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class ResendVerificationRequest(BaseModel):
    email: EmailStr


class ActionResponse(FlashResponse):
    """Flash response with an optional call to action for the client."""
    cta: str | None = None


class RegisterResponse(FlashResponse):
    redirect: bool = False


class LoginResponse(ActionResponse):
    user: UserResponse | None = None


class CurrentUserResponse(FlashResponse):
    user: UserResponse
