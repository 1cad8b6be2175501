from typing import Generator
import os
import pytest
from flask import Flask
from flask.testing import FlaskClient

from vidshelf.client import LocalMirror, MemoryStore, SyncPolicy
from tests.factories import FakeRemote


@pytest.fixture(scope="session", autouse=True)
def set_test_environment():
    os.environ["TESTING"] = "1"
    yield
    os.environ.pop("TESTING", None)


@pytest.fixture(scope="function")
def app() -> Generator[Flask, None, None]:
    from vidshelf.app_factory import create_app
    from vidshelf.models import db
    app = create_app({"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
    yield app
    with app.app_context():
        db.drop_all()


@pytest.fixture(scope="function")
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture(scope="function")
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture(scope="function")
def mirror() -> LocalMirror:
    return LocalMirror(MemoryStore(), "__test_mirror__")


@pytest.fixture(scope="function")
def sync(fake_remote: FakeRemote, mirror: LocalMirror) -> SyncPolicy:
    """A sync policy without debounce delay, backed by fakes."""
    return SyncPolicy(fake_remote, mirror, debounce_seconds=0)
