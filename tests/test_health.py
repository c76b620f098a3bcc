def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "operational"


def test_health(client):
    for path in ("/health", "/api/v1/health"):
        response = client.get(path)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"


def test_status_and_version(client):
    body = client.get("/status").json()
    assert body["realtime"]["connections"] == 0

    body = client.get("/api/version").json()
    assert body["api_prefix"] == "/api/v1"
