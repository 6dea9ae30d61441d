from fastapi import Request, Depends
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.errors import Forbidden, Unauthenticated
from app.models import User
from app.services.accounts import get_user_by_session

settings = get_settings()


def get_session_id(request: Request) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


def get_optional_current_user(request: Request, db: Session) -> User | None:
    """Get the current user if authenticated, None otherwise.

    This is useful for pages that show different content based on auth status.
    """
    return get_user_by_session(db, get_session_id(request))


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Get the current authenticated user. Raises Unauthenticated if there is none.

    The cookie must carry the session id most recently issued to the user, so
    logging in from somewhere else invalidates older cookies.
    """
    session_id = get_session_id(request)
    if not session_id:
        raise Unauthenticated()

    user = get_user_by_session(db, session_id)
    if not user:
        raise Unauthenticated("Your session has expired. Please log in again.")

    return user


def require_scope(*scopes: str):
    """Dependency factory for routes restricted to users holding one of ``scopes``."""

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.has_scope(*scopes):
            raise Forbidden()
        return user

    return dependency


require_admin = require_scope("admin")
