"""Tests for verification email delivery."""

import smtplib
from unittest.mock import patch

import pytest

from app.config import get_settings
from app.services.email import build_verification_url, send_verification_email


@pytest.fixture
def smtp_settings(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "smtp_user", "apikey")
    monkeypatch.setattr(settings, "smtp_password", "secret")
    return settings


class TestVerificationUrl:
    def test_url_points_at_client_view(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "app_url", "https://cms.example.com")
        url = build_verification_url("jane+news@example.com", "abc123")
        assert url == "https://cms.example.com/verify-email/jane%2Bnews@example.com/abc123"


class TestSendVerificationEmail:
    def test_development_without_smtp_logs_instead(self, caplog):
        with patch("app.services.email.smtplib.SMTP") as smtp_cls, caplog.at_level("INFO"):
            assert send_verification_email("jane@example.com", "Jane", "abc123") is True
        smtp_cls.assert_not_called()
        assert "/verify-email/jane@example.com/abc123" in caplog.text

    def test_production_without_smtp_fails(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "environment", "production")
        assert send_verification_email("jane@example.com", "Jane", "abc123") is False

    def test_sends_over_smtp(self, smtp_settings):
        with patch("app.services.email.smtplib.SMTP") as smtp_cls:
            assert send_verification_email("jane@example.com", "Jane", "abc123") is True

        server = smtp_cls.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("apikey", "secret")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "jane@example.com"
        assert message["Subject"] == "Verify your email address"

    def test_smtp_failure_returns_false(self, smtp_settings):
        with patch("app.services.email.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.__enter__.return_value.send_message.side_effect = (
                smtplib.SMTPException("rejected")
            )
            assert send_verification_email("jane@example.com", "Jane", "abc123") is False
