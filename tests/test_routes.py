"""Tests for the HTTP side: health checks, read-only lookups, static client."""

import json

from fastapi.testclient import TestClient

from bulletin.config import Settings
from bulletin.main import create_app


class TestHealth:

    def test_liveness(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.text == "OK"

    def test_status(self, make_client):
        client = make_client({"0001": [], "0002": ["A"]})
        body = client.get("/v1/health").json()

        assert body["status"] == "healthy"
        assert body["students_stored"] == 2
        assert body["connections_open"] == 0
        assert body["admin_auth_required"] is False

    def test_counts_open_sockets(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            assert client.get("/v1/health").json()["connections_open"] == 1


class TestReadOnly:

    def test_registry(self, make_client):
        client = make_client({"0001": ["Essay"]})
        assert client.get("/v1/registry").json() == {"0001": ["Essay"]}

    def test_student_found(self, make_client):
        client = make_client({"0001": ["Essay"]})
        resp = client.get("/v1/students/0001")

        assert resp.status_code == 200
        assert resp.json() == {"lrn": "0001", "requirements": ["Essay"]}

    def test_student_missing(self, client):
        assert client.get("/v1/students/9999").status_code == 404

    def test_sees_socket_edits(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"event": "removeStudentBulk", "data": {"lrns": ["0016"]}})
            ws.receive_json()

        assert client.get("/v1/students/0016").status_code == 404


class TestStaticClient:

    def test_index_served(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "Requirements Board" in resp.text


class TestShutdown:

    def test_final_save_on_exit(self, data_file):
        data_file.write_text(json.dumps({"0001": ["Essay"]}), encoding="utf-8")
        app = create_app(Settings(data_file=data_file))
        data_file.unlink()

        with TestClient(app):
            pass

        assert json.loads(data_file.read_text(encoding="utf-8")) == {"0001": ["Essay"]}
