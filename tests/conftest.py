"""Pytest fixtures.

- Each test gets its own SQLite file under tmp_path
- api_client wires the real routers + error handler onto a fresh app and
  points get_db at the test database
"""

import asyncio
from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from ecoquest.api.routes import register_routes
from ecoquest.common.exception_handlers import install_error_handler
from ecoquest.infra.db import build_engine, build_session_factory, get_db, init_persistence
from ecoquest.infra.storage import DbStorage


@pytest.fixture
def engine(tmp_path) -> Generator[Engine, None, None]:
    engine = build_engine(f"sqlite:///{tmp_path / 'data' / 'test.db'}")
    init_persistence(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return build_session_factory(engine)


@pytest.fixture
def storage(engine: Engine, session_factory) -> DbStorage:
    store = DbStorage(engine, session_factory)
    store.ensure_schema()
    return store


@pytest.fixture
def api_app(storage: DbStorage, session_factory) -> FastAPI:
    """App with API routes and the catch-all error handler, no asset serving."""
    app = FastAPI()
    asyncio.run(register_routes(app))
    install_error_handler(app)

    def _get_test_db() -> Generator[Session, None, None]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    return app


@pytest.fixture
def api_client(api_app: FastAPI) -> Generator[TestClient, None, None]:
    # AppError 响应后还会继续上抛，这里只看客户端拿到的响应
    with TestClient(api_app, raise_server_exceptions=False) as client:
        yield client
