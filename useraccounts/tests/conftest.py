from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from flask import Flask
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from useraccounts.app import create_app
from useraccounts.infrastructure.container import Container
from useraccounts.infrastructure.db import Base
from useraccounts.infrastructure.db import models  # noqa: F401  (registers tables)
from useraccounts.shared.config import AppConfig, AuthConfig, ClientConfig

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(  # type: ignore[call-arg]
        SECRET_KEY=TEST_SECRET,
        auth=AuthConfig(password_hash_method="pbkdf2:sha256:1000"),
        client=ClientConfig(api_url="http://testserver", token_file=tmp_path / "token"),
    )


@pytest.fixture()
def container(
    config: AppConfig,
    engine: Engine,
    session_factory: sessionmaker[Session],
    clock: FakeClock,
) -> Container:
    return Container(config=config, engine=engine, session_factory=session_factory, clock=clock)


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container, configure_logging=False)


@pytest.fixture()
def registration() -> dict[str, str]:
    return {
        "username": "alice",
        "email": "alice@example.com",
        "password": "secret123",
        "phone": "5551234567",
        "dob": "1990-05-17",
    }
