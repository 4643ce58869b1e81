from __future__ import annotations

import pytest

from english_center.main import create_app
from tests.fakes import make_container, make_world


@pytest.fixture
def world():
    return make_world()


@pytest.fixture
def app(monkeypatch, world):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=make_container(world))


@pytest.fixture
def client(app):
    return app.test_client()
