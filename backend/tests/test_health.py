from app.api.routes import health


def test_health_endpoints(client):
    assert client.get("/api/health").json() == {"status": "ok"}

    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    payload = ready.json()
    assert payload["status"] == "ok"
    assert payload["database"]["schema_ok"] is True
    assert payload["database"]["missing"] == {}


def test_ready_reports_missing_schema(client, monkeypatch):
    monkeypatch.setattr(health, "missing_schema_items", lambda: {"lessons": ["week_type"]})

    ready = client.get("/api/health/ready")

    assert ready.status_code == 503
    payload = ready.json()
    assert payload["status"] == "degraded"
    assert payload["database"]["missing"] == {"lessons": ["week_type"]}
