from app.models.user import User
from app.models.verification_token import VerificationToken
from app.models.page import Page
from app.models.role_grant import RoleGrant

__all__ = ["User", "VerificationToken", "Page", "RoleGrant"]
