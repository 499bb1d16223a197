import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from samity.db.base import Base, get_db
from samity.main import app
from samity.schemas.member import MemberUpsert
from samity.services import operations, repository


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def add_member(db):
    """Factory that adds a member through the façade and returns the stored row."""
    counter = {"n": 0}

    def _add(name=None, phone_number=None):
        counter["n"] += 1
        member_id = uuid.uuid4()
        operations.add_or_update_member(db, MemberUpsert(
            id=member_id,
            name=name or f"Member {counter['n']}",
            phone_number=phone_number or f"98765{counter['n']:05d}",
        ))
        return repository.get_member(db, member_id)

    return _add
