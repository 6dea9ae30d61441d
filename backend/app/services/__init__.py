from app.services.auth import (
    hash_password,
    verify_password,
    generate_identifier,
    generate_session_id,
    generate_verification_token,
)
from app.services.email import send_verification_email

__all__ = [
    "hash_password",
    "verify_password",
    "generate_identifier",
    "generate_session_id",
    "generate_verification_token",
    "send_verification_email",
]
