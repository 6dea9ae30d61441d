from pydantic import BaseModel, EmailStr, field_validator, model_validator

from app.schemas.common import FlashResponse


class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        if len(v) > 200:
            raise ValueError("Password must be at most 200 characters long")
        return v

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserResponse(BaseModel):
    user_id: str
    first_name: str
    last_name: str
    email: str
    is_verified: bool
    scope: list[str]

    class Config:
        from_attributes = True


class UpdateUserScopeRequest(BaseModel):
    user_id: str
    updated_scope: list[str]


class UsersListResponse(FlashResponse):
    users: list[UserResponse] = []


class UserScopeResponse(FlashResponse):
    user_scope: list[str] = []
