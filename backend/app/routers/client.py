"""Routes that serve the single-page client.

The client keeps its own copy of the auth flag and scope, seeded from
``initial_state`` here and refreshed through ``/api/users/me``. Redirecting
``/admin`` paths to the login page only spares anonymous visitors an empty
admin screen; the API routes behind it check the session themselves.
"""
from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_optional_current_user
from app.models import User

router = APIRouter(include_in_schema=False)
templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))

SITE_TITLE = "Page CMS"


def render_shell(request: Request, user: User | None, status_code: int = 200):
    initial_state = {
        "auth": {
            "isAuthenticated": user is not None,
            "scope": list(user.scope) if user else [],
        },
    }
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": SITE_TITLE, "initial_state": initial_state},
        status_code=status_code,
    )


@router.get("/")
@router.get("/page/{slug}")
@router.get("/login")
@router.get("/register")
@router.get("/send-email-verification")
@router.get("/email-sent/{email}")
@router.get("/verify-email/{email}/{token}")
def public_view(request: Request, db: Session = Depends(get_db)):
    """Client views that anyone may open."""
    return render_shell(request, get_optional_current_user(request, db))


@router.get("/admin")
@router.get("/admin/{path:path}")
def admin_view(request: Request, db: Session = Depends(get_db)):
    """Admin views. Visitors without a session are sent to the login page."""
    user = get_optional_current_user(request, db)
    if not user:
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return RedirectResponse(url=f"/login?{urlencode({'redirect': target})}", status_code=302)
    return render_shell(request, user)
