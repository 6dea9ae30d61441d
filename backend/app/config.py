from pydantic_settings import BaseSettings
from pydantic import model_validator
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_database: str = "page_cms"
    mysql_user: str = "page_cms"
    mysql_password: str = ""
    database_url_override: str = ""

    # Auth
    bcrypt_rounds: int = 10
    verification_token_expiry_hours: int = 24
    session_cookie_name: str = "session_id"
    session_max_age_hours: int = 24

    # Comma-separated list of emails that are granted the "admin" scope on registration.
    # Startup copies them into role_grants and never removes rows, so dropping an
    # address here does not revoke it; delete its role_grants row as well.
    admin_emails: str = ""

    # Email
    smtp_host: str = "smtp.sendgrid.net"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = "no-reply@example.com"

    # App
    app_url: str = "http://localhost:8000"
    environment: str = "development"
    log_level: str = "INFO"
    enable_scheduler: bool = False

    @model_validator(mode="after")
    def validate_smtp(self) -> "Settings":
        """Ensure verification emails can actually be sent outside development."""
        if self.environment == "production" and not (self.smtp_user and self.smtp_password):
            raise ValueError(
                "SMTP_USER and SMTP_PASSWORD must be set in production. "
                "Registration depends on sending verification emails."
            )
        return self

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"mysql+pymysql://{self.mysql_user}:{self.mysql_password}"
            f"@{self.mysql_host}:{self.mysql_port}/{self.mysql_database}"
            f"?charset=utf8mb4"
        )

    @property
    def admin_email_list(self) -> list[str]:
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
