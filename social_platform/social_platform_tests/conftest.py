"""
Pytest fixtures for the social service tests.

Every test gets its own application built around a temporary SQLite database
and upload directory.
"""
import pytest
from fastapi.testclient import TestClient

from social_platform.social_service.auth import USER, COMPANY, hash_password, create_access_token
from social_platform.social_service.config import Settings
from social_platform.social_service.db import Database
from social_platform.social_service.main import create_app
from social_platform.social_service.models import User, Company

DEFAULT_PASSWORD = "Secret123!"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def database(settings):
    database = Database.from_settings(settings)
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def create_user(database):
    """Insert a user directly and return its id."""
    def _create(nick, email=None, password=DEFAULT_PASSWORD, verified=True):
        db = database.session()
        try:
            u = User(
                name=nick.capitalize(),
                surname="Test",
                nick=nick,
                email=email or f"{nick}@example.com",
                password=hash_password(password),
                verified=verified,
            )
            db.add(u)
            db.commit()
            return u.id
        finally:
            db.close()
    return _create


@pytest.fixture
def create_company(database):
    """Insert a company directly and return its id."""
    def _create(legal_id, email=None, password=DEFAULT_PASSWORD, sectors="software", name=None):
        db = database.session()
        try:
            c = Company(
                legal_id=legal_id,
                name=name or f"Company {legal_id}",
                email=email or f"{legal_id}@corp.example.com",
                password=hash_password(password),
                sectors=sectors,
            )
            db.add(c)
            db.commit()
            return c.id
        finally:
            db.close()
    return _create


@pytest.fixture
def auth_header(settings):
    def _header(account_id, kind=USER):
        token = create_access_token(account_id, kind, settings)
        return {"Authorization": f"Bearer {token}"}
    return _header


@pytest.fixture
def company_header(auth_header):
    def _header(company_id):
        return auth_header(company_id, COMPANY)
    return _header
