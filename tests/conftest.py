# tests/conftest.py
from __future__ import annotations

import os
import tempfile

# antes de importar o app: nada de tocar ./data durante os testes
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="ticketqr-tests-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import ticketqr.models  # noqa: F401
from ticketqr.api.deps import get_db, get_issuer, get_usage_recorder, get_validator
from ticketqr.core.config import QRConfig
from ticketqr.db.base import Base
from ticketqr.main import api
from ticketqr.services.clock import RotationClock
from ticketqr.services.issuer import QRIssuer
from ticketqr.services.validator import QRValidator

SECRET = "test-ticket-secret"
EPOCH_SECONDS = 60


class FakeClock:
    """Callable time source (seconds) that tests move by hand."""

    def __init__(self, seconds: float):
        self.seconds = seconds

    def __call__(self) -> float:
        return self.seconds

    def at_epoch(self, epoch: int, offset: float = 5.0) -> "FakeClock":
        self.seconds = epoch * EPOCH_SECONDS + offset
        return self

    def advance(self, seconds: float) -> None:
        self.seconds += seconds


@pytest.fixture
def config() -> QRConfig:
    return QRConfig(secret_key=SECRET, epoch_seconds=EPOCH_SECONDS, refresh_seconds=45).check()


@pytest.fixture
def fake_now() -> FakeClock:
    return FakeClock(0).at_epoch(1000)


@pytest.fixture
def clock(config, fake_now) -> RotationClock:
    return RotationClock(config.epoch_millis, now=fake_now)


@pytest.fixture
def issuer(config, clock) -> QRIssuer:
    return QRIssuer(config, clock=clock)


@pytest.fixture
def validator(config, clock) -> QRValidator:
    return QRValidator(config, clock=clock)


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def client(issuer, validator, db_session_factory):
    def _get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    api.dependency_overrides[get_db] = _get_db
    api.dependency_overrides[get_issuer] = lambda: issuer
    api.dependency_overrides[get_validator] = lambda: validator
    api.dependency_overrides[get_usage_recorder] = lambda: None
    try:
        yield TestClient(api)
    finally:
        api.dependency_overrides.clear()
