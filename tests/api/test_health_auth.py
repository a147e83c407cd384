from expocrm.routes.auth import create_token, verify_token


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["service"] == "ExpoCRM API"


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready(client, engine):
    assert client.get("/api/health/ready").status_code == 200

    engine.event_storage.ping.return_value = False
    response = client.get("/api/health/ready")
    assert response.status_code == 503
    assert response.json()["ready"] is False


class TestAuth:

    def test_missing_header(self, anon_client):
        response = anon_client.get("/api/events")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_malformed_header(self, anon_client):
        response = anon_client.get("/api/events", headers={"Authorization": "Token abc"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid authorization header format"}

    def test_bad_token(self, anon_client):
        response = anon_client.get("/api/events", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid or expired token"}

    def test_valid_token(self, anon_client, engine):
        engine.event_service.list_events.return_value = []
        token = create_token("user-7", "ana@acme.test")

        response = anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["data"] == {"user_id": "user-7", "email": "ana@acme.test"}

    def test_expired_token(self):
        assert verify_token(create_token("user-7", expires_in_hours=-1)) is None


def test_unknown_route_uses_error_shape(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert "error" in response.json()


def test_unexpected_exception_is_500(client, engine):
    engine.event_service.list_events.side_effect = RuntimeError("boom")
    response = client.get("/api/events")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
