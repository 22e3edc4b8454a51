# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings():
    return Settings(jwt_secret_key=TEST_SECRET, database_url="sqlite://", log_level="WARNING")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()
