from __future__ import annotations

import io
import urllib.error
import urllib.parse
import urllib.request

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from drawity.client import GameClient
from drawity.server.app import app
from drawity.server.config import Settings, get_settings
from drawity.server.db import get_db, init_db


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def client(session_factory, settings):
    def _db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api(client, monkeypatch) -> GameClient:
    """A real GameClient whose urllib transport is routed into the TestClient."""

    def fake_urlopen(req: urllib.request.Request, timeout: float | None = None):
        path = urllib.parse.urlparse(req.full_url).path
        resp = client.request(
            req.get_method(),
            path,
            content=req.data,
            headers=dict(req.header_items()),
        )
        if resp.status_code >= 400:
            raise urllib.error.HTTPError(
                req.full_url, resp.status_code, resp.reason_phrase, resp.headers, io.BytesIO(resp.content)
            )
        return io.BytesIO(resp.content)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    return GameClient("http://testserver", timeout_s=1.0)
