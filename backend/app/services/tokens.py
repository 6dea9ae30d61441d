"""Email verification token lifecycle: issue, consume, resend and purge.

A token is ISSUED with an absolute expiry instant and ends up either CONSUMED
(deleted when the user verifies) or EXPIRED (left in place until the purge
job removes it). Resending issues an additional token and keeps the earlier
ones valid, so a link opened on another device still works.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import commit_or_raise
from app.errors import TokenInvalidOrExpired, UpstreamFailure, UserNotFound
from app.models import User, VerificationToken
from app.services.auth import generate_verification_token
from app.services.email import send_verification_email

logger = logging.getLogger(__name__)
settings = get_settings()


@dataclass
class VerificationResult:
    user: User
    already_verified: bool = False


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_email(raw_email: str | None) -> str:
    return (raw_email or "").strip().lower()


def get_user_by_email(db: Session, email: str, cta: str | None = None) -> User:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user:
        raise UserNotFound(cta=cta)
    return user


def issue_token(db: Session, user: User, now: datetime | None = None) -> VerificationToken:
    """Create a verification token for ``user``. The caller commits."""
    issued_at = now or utcnow()
    token = VerificationToken(
        token=generate_verification_token(),
        expires_at=issued_at + timedelta(hours=settings.verification_token_expiry_hours),
    )
    user.verification_tokens.append(token)
    db.add(token)
    return token


def dispatch_verification_email(user: User, token: VerificationToken) -> None:
    """Send the verification link, raising UpstreamFailure if delivery fails."""
    if not send_verification_email(user.email, user.first_name, token.token):
        raise UpstreamFailure(
            "We couldn't send the verification email. Please request a new verification link.",
            cta="resendVerification",
        )


def consume_token(db: Session, email: str, token: str, now: datetime | None = None) -> VerificationResult:
    """Verify a user's email address with a token they received.

    The user is looked up before the token so that a user who already
    verified (e.g. by revisiting the link) is told so, rather than being
    told the link expired.
    """
    user = get_user_by_email(db, email, cta="register")

    if user.is_verified:
        return VerificationResult(user=user, already_verified=True)

    current_time = now or utcnow()
    match = (
        db.query(VerificationToken)
        .filter(
            VerificationToken.user_id == user.id,
            VerificationToken.token == token,
            VerificationToken.expires_at > current_time,
        )
        .first()
    )
    if not match:
        logger.info("Rejected invalid or expired verification token for %s", user.email)
        raise TokenInvalidOrExpired(cta="resendVerification")

    user.is_verified = True
    db.query(VerificationToken).filter(VerificationToken.user_id == user.id).delete(
        synchronize_session="fetch"
    )
    commit_or_raise(db, "verify your email address")

    logger.info("Verified email for user %s", user.user_id)
    return VerificationResult(user=user)


def resend_verification(db: Session, email: str) -> VerificationResult:
    """Issue a new token for an unverified user and email it to them."""
    user = get_user_by_email(db, email, cta="register")

    if user.is_verified:
        return VerificationResult(user=user, already_verified=True)

    token = issue_token(db, user)
    commit_or_raise(db, "create a new verification link")

    dispatch_verification_email(user, token)
    logger.info("Resent verification link to user %s", user.user_id)
    return VerificationResult(user=user)


def purge_expired_tokens(db: Session, now: datetime | None = None) -> int:
    """Delete tokens past their expiry. Returns the number deleted."""
    current_time = now or utcnow()
    deleted = (
        db.query(VerificationToken)
        .filter(VerificationToken.expires_at <= current_time)
        .delete(synchronize_session=False)
    )
    commit_or_raise(db, "purge expired verification tokens")
    return deleted
