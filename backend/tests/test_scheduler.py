"""Tests for the scheduled expired-token cleanup."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from app import scheduler
from app.models import VerificationToken
from app.services.tokens import utcnow


@pytest.fixture
def scheduler_sessions(db):
    """Point the cleanup job at the test database."""
    with patch("app.database.SessionLocal", sessionmaker(bind=db.get_bind())):
        yield


class TestCleanupExpiredTokens:
    def test_cleanup_deletes_expired_tokens(self, db, make_user, scheduler_sessions, caplog):
        user = make_user(is_verified=False)
        db.add(VerificationToken(user_id=user.id, token="old", expires_at=utcnow() - timedelta(hours=2)))
        db.add(VerificationToken(user_id=user.id, token="new", expires_at=utcnow() + timedelta(hours=2)))
        db.commit()

        with caplog.at_level("INFO"):
            assert scheduler.cleanup_expired_tokens() == 1
        assert [t.token for t in db.query(VerificationToken).all()] == ["new"]
        assert "Deleted 1 expired verification tokens" in caplog.text

    def test_cleanup_survives_database_errors(self, scheduler_sessions):
        with patch(
            "app.services.tokens.purge_expired_tokens",
            side_effect=OperationalError("DELETE", {}, Exception("gone away")),
        ):
            assert scheduler.cleanup_expired_tokens() == 0


class TestSchedulerLifecycle:
    def test_start_registers_hourly_job(self):
        with patch("app.scheduler.BackgroundScheduler") as scheduler_cls:
            scheduler.start_scheduler()

            instance = scheduler_cls.return_value
            instance.add_job.assert_called_once()
            assert instance.add_job.call_args.kwargs["id"] == "cleanup_expired_tokens"
            instance.start.assert_called_once()

            scheduler.shutdown_scheduler()
            instance.shutdown.assert_called_once_with(wait=False)
            assert scheduler.scheduler is None

    def test_shutdown_without_start_is_a_noop(self):
        scheduler.shutdown_scheduler()
        assert scheduler.scheduler is None
