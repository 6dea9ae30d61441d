import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.schemas import (
    ActionResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    ResendVerificationRequest,
    UserResponse,
)
from app.services.accounts import authenticate, register_user
from app.services.tokens import consume_token, resend_verification

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new user and send verification email."""
    user = register_user(db, data)
    return RegisterResponse(
        redirect=True,
        flash=f"Registration successful. Please check {user.email} for a verification link.",
    )


@router.get("/verify-email/{email}/{token}", response_model=ActionResponse)
def verify_email(email: str, token: str, db: Session = Depends(get_db)):
    """Verify email address using the token sent via email."""
    result = consume_token(db, email, token)

    if result.already_verified:
        return ActionResponse(
            flash=f"Your email address ({result.user.email}) has already been verified.",
            cta="login",
        )

    return ActionResponse(
        flash=f"Your email address ({result.user.email}) has been verified.",
        cta="login",
    )


@router.post("/resend-verification-link", response_model=ActionResponse)
def resend_verification_link(data: ResendVerificationRequest, db: Session = Depends(get_db)):
    """Send a new verification link if the user exists and is not verified."""
    result = resend_verification(db, data.email)

    if result.already_verified:
        return ActionResponse(
            flash=f"Your email address ({result.user.email}) has already been verified.",
            cta="login",
        )

    return ActionResponse(flash=f"A new verification link has been sent to {result.user.email}.")


@router.post("/login", response_model=LoginResponse)
def login(login_data: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login and receive a session cookie."""
    user = authenticate(db, login_data.email, login_data.password)

    # httpOnly cookie holding only the opaque session id - secure only in production (HTTPS)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=user.session_id,
        httponly=True,
        secure=settings.environment == "production",
        samesite="strict" if settings.environment == "production" else "lax",
        max_age=60 * 60 * settings.session_max_age_hours,
    )

    return LoginResponse(
        flash=f'"{user.full_name}" has successfully logged in!',
        user=UserResponse.model_validate(user),
    )


@router.get("/logout", response_model=ActionResponse)
def logout(response: Response):
    """Logout by clearing the session cookie. Works with or without a valid session."""
    response.delete_cookie(key=settings.session_cookie_name)
    return ActionResponse(flash="You have successfully logged out.")
