import os
from datetime import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret')

from backend.auth import jwt_handler  # noqa: E402
from backend.database import Base, get_db  # noqa: E402
from backend.main import app  # noqa: E402
from backend.models.slot import Slot  # noqa: E402


CATALOG = [
    (5, 'Monday', time(9, 0), time(10, 0)),
    (7, 'Wednesday', time(13, 0), time(14, 0)),
    (9, 'Friday', time(15, 0), time(16, 30)),
]


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def slot_catalog(session_factory) -> dict[int, tuple]:
    db = session_factory()
    try:
        for slot_id, day, start, end in CATALOG:
            db.add(Slot(id=slot_id, day=day, start=start, end=end))
        db.commit()
    finally:
        db.close()
    return {slot_id: (day, start, end) for slot_id, day, start, end in CATALOG}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def bearer(subject: str = '1', role: str = 'patient', expires_minutes: int | None = None) -> dict[str, str]:
    token = jwt_handler.create_access_token(subject, role, expires_minutes=expires_minutes)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return bearer()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return bearer(subject='99', role='admin')


@pytest.fixture
def make_headers():
    return bearer
