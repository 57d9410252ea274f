class TestHealth:
    def test_liveness(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "api"}

    def test_readiness_checks_database(self, client):
        response = client.get("/health/ready")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ready"
        assert body["checks"]["database"]["status"] == "healthy"

    def test_database_reports_pool(self, client):
        body = client.get("/health/database").json()
        assert body["status"] == "healthy"
        assert set(body["pool"]) == {"size", "checked_in", "checked_out", "overflow"}

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_request_id_generated(self, client):
        assert client.get("/health").headers["X-Request-ID"]
