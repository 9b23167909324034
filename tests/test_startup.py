import asyncio

import mongomock
import pytest
from pymongo.errors import ServerSelectionTimeoutError

from catalog_api import storage
from catalog_api.main import create_app, open_database

from .conftest import FakeOcr


def unreachable(*args, **kwargs):
    raise ServerSelectionTimeoutError("cluster unreachable")


def run_lifespan(app):
    async def enter():
        async with app.router.lifespan_context(app):
            pass

    asyncio.run(enter())


def test_open_database_exits_when_mongo_is_unreachable(monkeypatch):
    monkeypatch.setattr(storage, "connect", unreachable)
    with pytest.raises(SystemExit) as excinfo:
        open_database()
    assert excinfo.value.code == 1


def test_startup_stops_when_mongo_is_unreachable(monkeypatch):
    monkeypatch.setattr(storage, "connect", unreachable)
    app = create_app(ocr=FakeOcr())
    with pytest.raises(SystemExit):
        run_lifespan(app)


def test_startup_opens_and_closes_connection(monkeypatch):
    database = mongomock.MongoClient()["Products"]
    closed = []
    monkeypatch.setattr(storage, "connect", lambda: database)
    monkeypatch.setattr(storage, "close", closed.append)

    app = create_app(ocr=FakeOcr())
    run_lifespan(app)
    assert app.state.db is database
    assert closed == [database]


def test_injected_database_is_left_open(db, monkeypatch):
    monkeypatch.setattr(storage, "connect", unreachable)
    closed = []
    monkeypatch.setattr(storage, "close", closed.append)

    app = create_app(db=db, ocr=FakeOcr())
    run_lifespan(app)
    assert app.state.db is db
    assert closed == []
