"""Shared fixtures: a fresh app per test and stand-in Google credentials."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from calendar_oauth_app.api import create_app
from calendar_oauth_app.auth.session import UserSession


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def store(app):
    return app.state.session_store


@pytest.fixture
def credentials() -> MagicMock:
    creds = MagicMock(name="Credentials")
    creds.token = "access-token"
    creds.refresh_token = "refresh-token"
    return creds


@pytest.fixture
def signed_in(store, credentials) -> UserSession:
    session = UserSession(name="A", email="a@x.com", picture="p", credentials=credentials)
    store.set(session)
    return session
