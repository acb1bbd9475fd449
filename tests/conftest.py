import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from field_service.db.init_db import init_db
from field_service.db.session import get_db
from field_service.services.storage import LocalObjectStorage, get_storage
from main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(root_dir=str(tmp_path / "photos"), public_url="http://testserver/storage/service-photos")


@pytest.fixture
def anon_client(db, storage):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(anon_client):
    resp = anon_client.post(
        "/auth/sign-up",
        json={"email": "office@example.com", "password": "correct-horse"},
    )
    assert resp.status_code == 201
    token = resp.json()["data"]["access_token"]
    anon_client.headers.update({"Authorization": f"Bearer {token}"})
    return anon_client


