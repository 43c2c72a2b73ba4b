"""
Pytest configuration and shared fixtures for the transcript backend tests.

This file provides reusable fixtures and configuration for all pytest tests.
"""

from typing import Dict, Optional

import pytest
from fastapi.testclient import TestClient

from acc_transcript_backend.app_config import AppConfig
from acc_transcript_backend.auth import AccessControl, ApiKeyTable
from acc_transcript_backend.config import TranscriptServerConfig
from acc_transcript_backend.main import create_app
from acc_transcript_backend.models.user import AccessLevel, CallerIdentity
from acc_transcript_backend.services.query_engine import QueryEngine
from acc_transcript_backend.transcript_store import TranscriptStore

ADMIN_KEY = "acc-demo-key-001"
JOHN_KEY = "acc-john-key-002"
SARAH_KEY = "acc-sarah-key-003"

ADMIN = CallerIdentity(
    email="demo@accfinance.com",
    access_level=AccessLevel.ADMIN,
    allowed_clients=frozenset({"*"}),
)
CLIENT_X_ONLY = CallerIdentity(
    email="x-only@accfinance.com",
    allowed_clients=frozenset({"Client X"}),
)
SARAH = CallerIdentity(
    email="sarah@accfinance.com",
    allowed_clients=frozenset({"Client Z"}),
)
NO_CLIENTS = CallerIdentity(email="nobody@accfinance.com")


def auth_headers(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


@pytest.fixture
def store() -> TranscriptStore:
    return TranscriptStore.default()


@pytest.fixture
def engine(store) -> QueryEngine:
    return QueryEngine(store)


@pytest.fixture
def access_control() -> AccessControl:
    return AccessControl(ApiKeyTable.from_config(TranscriptServerConfig().auth.api_keys))


@pytest.fixture
def app(store):
    return create_app(
        app_config=AppConfig(),
        server_config=TranscriptServerConfig(),
        store=store,
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
