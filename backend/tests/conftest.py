"""Pytest configuration and fixtures for Page CMS tests."""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["ADMIN_EMAILS"] = ""
os.environ["BCRYPT_ROUNDS"] = "4"

from app.database import Base, get_db
from app.main import app
from app.models import Page, User
from app.services.auth import generate_identifier, generate_session_id, hash_password


# Use in-memory SQLite for tests
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Enable foreign key support for SQLite (required for ON DELETE CASCADE)
@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Create a test client with database dependency override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sent_emails():
    """Capture verification emails instead of sending them."""
    with patch("app.services.tokens.send_verification_email") as mock_send:
        mock_send.return_value = True
        yield mock_send


@pytest.fixture
def make_user(db):
    """Factory for users stored directly in the database."""
    def _make_user(
        email="jane@example.com",
        password="secret1",
        is_verified=True,
        scope=None,
        first_name="Jane",
        last_name="Doe",
    ):
        user = User(
            user_id=generate_identifier(),
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=hash_password(password),
            is_verified=is_verified,
            scope=scope or ["user"],
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


def log_in(client, db, user):
    """Give ``user`` a session and put its cookie on the client."""
    user.session_id = generate_session_id()
    db.commit()
    client.cookies.clear()
    client.cookies.set("session_id", user.session_id)
    return user


@pytest.fixture
def verified_user(make_user):
    return make_user()


@pytest.fixture
def admin_user(make_user):
    return make_user(
        email="admin@example.com",
        first_name="Ada",
        last_name="Admin",
        scope=["user", "admin"],
    )


@pytest.fixture
def admin_client(client, db, admin_user):
    """Test client logged in as an admin."""
    log_in(client, db, admin_user)
    return client


@pytest.fixture
def user_client(client, db, verified_user):
    """Test client logged in as a user without the admin scope."""
    log_in(client, db, verified_user)
    return client


@pytest.fixture
def make_page(db):
    """Factory for pages stored directly in the database."""
    def _make_page(title, slug=None, content="", sort_position=0):
        page = Page(
            page_id=generate_identifier(),
            title=title,
            slug=slug or title.lower().replace(" ", "-"),
            content=content,
            sort_position=sort_position,
        )
        db.add(page)
        db.commit()
        db.refresh(page)
        return page

    return _make_page


@pytest.fixture
def login_as(client, db):
    """Log the test client in as the given user."""
    def _login_as(user):
        return log_in(client, db, user)

    return _login_as
