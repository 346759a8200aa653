def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200 and r.json()["status"] == "healthy"


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200 and r.json()["message"] == "MyCerti API"


def test_unknown_route_uses_error_shape(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert "error" in r.json()
