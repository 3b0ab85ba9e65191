import pytest
from fastapi.testclient import TestClient

from autoassign.server import create_app


@pytest.fixture
def captured():
    return []


@pytest.fixture
def make_client(relay_config, assignments, captured):
    def _make(sentry_client):
        app = create_app(relay_config, assignments, sentry_client, capture=captured.append)
        return TestClient(app)
    return _make


def test_events_assigns_mapped_project(make_client, dummy_client):
    client = make_client(dummy_client)

    response = client.post("/events", json={"id": "1170820242", "project": "sentry-bot"})

    assert response.status_code == 200
    assert response.content == b""
    assert dummy_client.calls == [("1170820242", "name@domain.com")]


def test_events_ignores_extra_payload_fields(make_client, dummy_client):
    client = make_client(dummy_client)

    response = client.post("/events", json={
        "id": "42",
        "project": "sentry-bot-client",
        "project_name": "Sentry Bot Client",
        "level": "error",
    })

    assert response.status_code == 200
    assert dummy_client.calls == [("42", "name2@domain.com")]


def test_events_unknown_project(make_client, dummy_client, caplog):
    client = make_client(dummy_client)

    response = client.post("/events", json={"id": "42", "project": "other-project"})

    assert response.status_code == 200
    assert dummy_client.calls == []
    assert "no default assignee for the other-project project" in caplog.text


@pytest.mark.parametrize("body", [b"{not json", b'{"id": "42"}', b""])
def test_events_malformed_payload(make_client, dummy_client, body):
    client = make_client(dummy_client)

    response = client.post("/events", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert dummy_client.calls == []


def test_events_upstream_failure_still_200(make_client, failing_client, caplog):
    client = make_client(failing_client)

    response = client.post("/events", json={"id": "42", "project": "sentry-bot"})

    assert response.status_code == 200
    assert failing_client.calls == [("42", "name@domain.com")]
    assert "non-200 status" in caplog.text


def test_events_are_not_deduplicated(make_client, dummy_client):
    client = make_client(dummy_client)
    payload = {"id": "42", "project": "sentry-bot"}

    client.post("/events", json=payload)
    client.post("/events", json=payload)

    assert dummy_client.calls == [("42", "name@domain.com"), ("42", "name@domain.com")]


def test_fire_sends_culprit(make_client, dummy_client, captured):
    client = make_client(dummy_client)

    response = client.post("/fire", json={"culprit": "test-alert"})

    assert response.status_code == 200
    assert response.content == b""
    assert captured == ["test-alert"]
    assert dummy_client.calls == []


@pytest.mark.parametrize("body", [b"{not json", b"[]", b'{"culprit": 5}'])
def test_fire_malformed_payload(make_client, dummy_client, captured, body):
    client = make_client(dummy_client)

    response = client.post("/fire", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert captured == []


def test_fire_accepts_empty_object(make_client, dummy_client, captured):
    client = make_client(dummy_client)

    response = client.post("/fire", content=b"{}", headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    assert captured == [""]


@pytest.mark.parametrize("path", ["/events", "/fire"])
def test_routes_only_accept_post(make_client, dummy_client, path):
    client = make_client(dummy_client)
    assert client.get(path).status_code == 405


def test_unknown_route(make_client, dummy_client):
    response = make_client(dummy_client).post("/webhook/sentry", json={})
    assert response.status_code == 404
    assert response.json()["error"] == "Not found"


def test_health(make_client, dummy_client):
    response = make_client(dummy_client).get("/health")
    assert response.json() == {"status": "healthy", "service": "autoassign", "projects": 2}


def test_shutdown_closes_client(make_client, dummy_client):
    with make_client(dummy_client):
        pass
    assert dummy_client.closed


def test_error_payload_written_to_log_dir(make_client, dummy_client, monkeypatch, tmp_path):
    monkeypatch.setenv("AUTOASSIGN_LOG_DIR", str(tmp_path))
    client = make_client(dummy_client)

    client.post("/events", content=b"{not json")

    error_files = list(tmp_path.glob("error-*.log"))
    assert len(error_files) == 1
    assert "{not json" in error_files[0].read_text()
