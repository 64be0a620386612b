"""Shared fixtures: one ``repo`` fixture parametrised over every backend."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import mongomock
import pytest
from pydantic import BaseModel
from sqlalchemy import DateTime, Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from query_repository import FixedClock
from query_repository.memory import MemoryRepository
from query_repository.mongo import MongoRepository
from query_repository.sql import SQLAlchemyRepository

NOW = datetime(2012, 11, 10, 12, 0, tzinfo=timezone.utc)
FIELDS = ("id", "name", "age", "opened_at", "created_at", "updated_at")

BACKENDS = ["memory", "sqlalchemy", "sqlalchemy_orm", "mongo"]


class User(BaseModel):
    id: int | str | None = None
    name: str | None = None
    age: int | None = None
    opened_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Base(DeclarativeBase):
    pass


class UserRecord(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    opened_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def dump(record: Any) -> dict[str, Any]:
    """Field map of a returned record, whatever type the backend returns."""
    return {name: getattr(record, name) for name in FIELDS}


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def sql_session_factory():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(engine)
    engine.dispose()


@pytest.fixture
def mongo_collection():
    client = mongomock.MongoClient()
    yield client.test_db.users
    client.close()


@pytest.fixture(params=BACKENDS)
def backend(request) -> str:
    return request.param


@pytest.fixture
def repo(backend, clock, request):
    if backend == "memory":
        yield MemoryRepository(User, clock=clock)
    elif backend.startswith("sqlalchemy"):
        session_factory = request.getfixturevalue("sql_session_factory")
        yield SQLAlchemyRepository(
            UserRecord,
            session_factory=session_factory,
            domain_model_cls=User if backend == "sqlalchemy" else None,
            clock=clock,
        )
    else:
        collection = request.getfixturevalue("mongo_collection")
        yield MongoRepository(User, collection=collection, clock=clock)


@pytest.fixture
def make_model(backend):
    """Build an unsaved model of the type the backend accepts."""
    model_cls = UserRecord if backend == "sqlalchemy_orm" else User

    def _make(**attrs: Any) -> Any:
        return model_cls(**attrs)

    return _make


@pytest.fixture
def dated_records(repo):
    """Three records opened 5, 3 and 1 days ago, created in that order."""
    return [
        repo.create({"opened_at": days_ago(5)}),
        repo.create({"opened_at": days_ago(3)}),
        repo.create({"opened_at": days_ago(1)}),
    ]
