import secrets
import time
import uuid

from passlib.context import CryptContext

from app.config import get_settings

settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def generate_identifier() -> str:
    """Generate an opaque id qualified with the current time in milliseconds."""
    return f"{uuid.uuid4()}-{int(time.time() * 1000)}"


def generate_session_id() -> str:
    """Generate a new session id. A fresh one is issued on every login."""
    return generate_identifier()


def generate_verification_token() -> str:
    """Generate a random token (16 bytes, hex encoded) for email verification."""
    return secrets.token_hex(16)
