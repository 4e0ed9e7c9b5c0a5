def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "test"


def test_detailed_health_reports_services(client):
    body = client.get("/health/detailed").json()
    assert body["services"]["database"]["status"] == "healthy"
    assert body["services"]["llm"]["status"] == "not_configured"
    assert body["services"]["auth"]["mode"] == "mock"


def test_ready_and_live(client):
    assert client.get("/ready").json() == {"status": "ready"}
    assert client.get("/live").json()["status"] == "alive"


def test_root(client):
    body = client.get("/").json()
    assert body["message"] == "MicroMentor API"
    assert body["health_check"] == "/health"
