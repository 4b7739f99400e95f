import os

# main builds the module-level app at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SECRET_KEY="test-secret-key",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'expense_tracker.db'}",
        PASSWORD_HASH_ROUNDS=1,
        _env_file=None,
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def token(client):
    client.post("/register", json={"username": "alice", "password": "s3cret"})
    response = client.post("/login", json={"username": "alice", "password": "s3cret"})
    return response.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def create_transaction(client, auth_headers):
    def _create(**fields):
        body = {
            "type": "expense",
            "category": "food",
            "amount": 12.5,
            "date": "2024-03-05",
            "description": "lunch",
        }
        body.update(fields)
        response = client.post("/transactions", json=body, headers=auth_headers)
        assert response.status_code == 201
        return response.json()["id"]
    return _create
