import json

import pytest
from fastapi.testclient import TestClient

from bulletin.config import Settings
from bulletin.main import create_app

PASSWORD = "s3cret-Board"


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture
def make_client(data_file):
    """Build a TestClient over a fresh app. Pass `data` to seed the data file."""
    clients = []

    def _make(data=None, **overrides):
        if data is not None:
            data_file.write_text(json.dumps(data), encoding="utf-8")
        settings = Settings(data_file=data_file, admin_password=PASSWORD, **overrides)
        client = TestClient(create_app(settings))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()
