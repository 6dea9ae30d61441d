import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import commit_or_raise
from app.errors import EmailNotVerified, EmailTaken, InvalidCredentials, UserNotFound, ValidationError
from app.models import RoleGrant, User
from app.models.user import DEFAULT_SCOPE
from app.schemas import RegisterRequest
from app.services.auth import generate_identifier, generate_session_id, hash_password, verify_password
from app.services.tokens import dispatch_verification_email, issue_token, normalize_email

logger = logging.getLogger(__name__)
settings = get_settings()

ALLOWED_SCOPES = ("user", "admin")


def normalize_scope(scope: list[str]) -> list[str]:
    """Deduplicate a scope list and make sure it starts with "user"."""
    normalized = list(DEFAULT_SCOPE)
    for role in scope:
        role = role.strip().lower()
        if role not in ALLOWED_SCOPES:
            raise ValidationError(f"Scope must only contain: {', '.join(ALLOWED_SCOPES)}.")
        if role not in normalized:
            normalized.append(role)
    return normalized


def granted_scope(db: Session, email: str) -> list[str]:
    """Scope a newly registered user receives, from the role grant table and settings."""
    grants = [g.scope for g in db.query(RoleGrant).filter(RoleGrant.email == email).order_by(RoleGrant.id)]
    if email in settings.admin_email_list:
        grants.append("admin")
    return normalize_scope(grants)


def seed_role_grants(db: Session, admin_emails: list[str]) -> int:
    """Ensure every configured admin email has an "admin" grant. Returns rows added.

    Existing grants are left alone, including ones for emails no longer listed.
    """
    existing = {
        g.email for g in db.query(RoleGrant).filter(RoleGrant.scope == "admin").all()
    }
    added = 0
    for email in admin_emails:
        email = normalize_email(email)
        if email and email not in existing:
            db.add(RoleGrant(email=email, scope="admin"))
            existing.add(email)
            added += 1
    if added:
        commit_or_raise(db, "seed role grants")
        logger.info("Seeded %s admin role grant(s)", added)
    return added


def register_user(db: Session, data: RegisterRequest) -> User:
    """Create an unverified user with a verification token and email the link."""
    email = normalize_email(data.email)

    if db.query(User).filter(User.email == email).first():
        raise EmailTaken()

    user = User(
        user_id=generate_identifier(),
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=email,
        password_hash=hash_password(data.password),
        is_verified=False,
        scope=granted_scope(db, email),
    )
    db.add(user)
    token = issue_token(db, user)

    # User and token are written together; a concurrent registration with
    # the same email trips the unique index here.
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise EmailTaken()
    commit_or_raise(db, "create your account")

    logger.info("Registered user %s with scope %s", user.user_id, user.scope)
    dispatch_verification_email(user, token)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Check credentials and rotate the user's session id.

    Unknown email and wrong password raise the same error so that callers
    cannot tell which accounts exist.
    """
    user = db.query(User).filter(User.email == normalize_email(email)).first()

    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()

    if not user.is_verified:
        raise EmailNotVerified(cta="resendVerification")

    # Replacing the stored id ends any session the user had elsewhere
    user.session_id = generate_session_id()
    commit_or_raise(db, "log you in")

    logger.info("User %s logged in", user.user_id)
    return user


def get_user_by_session(db: Session, session_id: str | None) -> User | None:
    if not session_id:
        return None
    return db.query(User).filter(User.session_id == session_id).first()


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at, User.id).all()


def update_user_scope(db: Session, user_id: str, scope: list[str]) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise UserNotFound("That user does not exist.")

    user.scope = normalize_scope(scope)
    commit_or_raise(db, "update the user's scope")

    logger.info("Updated scope of user %s to %s", user.user_id, user.scope)
    return user
