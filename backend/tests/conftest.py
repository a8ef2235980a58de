"""
Shared fixtures for the backpack test suite.

Each test gets its own SQLite file and upload directory under tmp_path. The
app fixture overrides get_db and get_upload_manager so nothing touches the
configured database or ./uploads.
"""

from __future__ import annotations

import os
import tempfile

# Settings are read at import time; point them somewhere harmless first.
_SCRATCH = tempfile.mkdtemp(prefix="backpack-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_SCRATCH}/unused.db")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_SCRATCH, "uploads"))
os.environ["LOG_FILE"] = ""

from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

import backpack.models  # noqa: E402,F401
from backpack.api.deps import get_upload_manager  # noqa: E402
from backpack.db.base import Base  # noqa: E402
from backpack.db.session import get_db, make_engine  # noqa: E402
from backpack.services.record_store import RecordStore  # noqa: E402
from backpack.services.uploads import UploadManager  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'backpack-test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db_session: Session) -> RecordStore:
    return RecordStore(db_session)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def uploads(upload_dir) -> UploadManager:
    return UploadManager(upload_dir, max_bytes=1024 * 1024, timeout_seconds=5)


@pytest.fixture
def app(session_factory, uploads: UploadManager) -> Generator[FastAPI, None, None]:
    from backpack.main import create_app

    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_manager] = lambda: uploads
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
