import html
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from urllib.parse import quote

from app.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


def build_verification_url(email: str, token: str) -> str:
    """Client URL that the user follows to verify their email address."""
    return f"{settings.app_url}/verify-email/{quote(email, safe='@')}/{token}"


def send_verification_email(to_email: str, first_name: str, verification_token: str) -> bool:
    """Send an email verification link to the user.

    Returns True if email was sent successfully, False otherwise.
    """
    verification_url = build_verification_url(to_email, verification_token)
    safe_name = html.escape(first_name)

    subject = "Verify your email address"
    html_body = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .button {{
                display: inline-block;
                padding: 12px 24px;
                background-color: #2b6cb0;
                color: white;
                text-decoration: none;
                border-radius: 4px;
                margin: 20px 0;
            }}
            .footer {{ color: #666; font-size: 12px; margin-top: 30px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <p>Hello {safe_name},</p>
            <p>Please verify your email address by clicking the link below.</p>
            <a href="{verification_url}" class="button">Verify Email Address</a>
            <p>Or copy and paste this link into your browser:</p>
            <p style="word-break: break-all;">{verification_url}</p>
            <p>This link will expire in {settings.verification_token_expiry_hours} hours.</p>
            <div class="footer">
                <p>If you didn't create an account, you can safely ignore this email.</p>
            </div>
        </div>
    </body>
    </html>
    """

    text_body = f"""
    Hello {first_name},

    Please verify your email address by clicking the link:

    {verification_url}

    This link will expire in {settings.verification_token_expiry_hours} hours.

    If you didn't create an account, you can safely ignore this email.
    """

    return _send_email(to_email, subject, html_body, text_body)


def _send_email(to_email: str, subject: str, html_body: str, text_body: str) -> bool:
    """Send an email via SMTP. Returns True on success."""
    if not settings.smtp_user or not settings.smtp_password:
        if settings.environment == "development":
            # No mail server in dev: the message body is logged so links can be followed by hand
            logger.info("SMTP not configured, email to %s not sent: %s\n%s", to_email, subject, text_body)
            return True
        logger.warning("SMTP credentials not configured, skipping email send")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.from_email or settings.smtp_user
    msg["To"] = to_email

    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
        logger.info("Email sent to %s: %s", to_email, subject[:50])
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        return False
