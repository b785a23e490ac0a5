"""Shared fixtures for the pet registry tests."""

from __future__ import annotations

import os
import tempfile

# The module-level app in ``main`` opens the configured database when it
# is imported; keep it away from the project directory.
os.environ.setdefault("DATABASE_URL", os.path.join(tempfile.mkdtemp(), "pet_registry_test.db"))

import pytest
from fastapi.testclient import TestClient

from pet_registry_api.app.core.config import Settings
from pet_registry_api.app.core.security import create_access_token
from pet_registry_api.app.main import create_app
from pet_registry_api.app.schemas.pet import PetCreate
from pet_registry_api.app.services.pet_service import PetService
from pet_registry_api.app.services.pet_store import PetStore

TEST_SECRET = "test-secret"


class FakeClock:
    """Deterministic nanosecond clock advancing by ``step`` on every call."""

    def __init__(self, start: int = 1_700_000_000_000_000_000, step: int = 1_000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


def make_payload(**overrides) -> PetCreate:
    data = {
        "name": "Rex",
        "breed": "Beagle",
        "age": 3,
        "weight": 12.5,
        "health_record": "none",
        "vaccination": False,
    }
    data.update(overrides)
    return PetCreate(**data)


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "pets.db")


@pytest.fixture
def store(db_path) -> PetStore:
    return PetStore(db_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(store, clock) -> PetService:
    return PetService(store, clock=clock)


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(database_url=db_path, secret_key=TEST_SECRET, max_value_size=4096)


@pytest.fixture
def client(settings) -> TestClient:
    return TestClient(create_app(settings))


def auth_headers(owner: str) -> dict:
    token = create_access_token({"sub": owner}, secret_key=TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}
