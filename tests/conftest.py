# tests/conftest.py
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storecms.db.base import Base
from storecms.db.session import get_db, make_engine
import storecms.models  # noqa: F401  (register tables on Base.metadata)


@pytest.fixture()
def engine():
    """One in-memory SQLite database per test, schema built from the models."""
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db: Session):
    """
    TestClient whose get_db dependency yields the test's session, so the API
    and the assertions see the same database.
    """
    from storecms.main import app  # late import: app setup reads settings

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture()
def api():
    from storecms.core.settings import settings
    return settings.API_V1_STR
