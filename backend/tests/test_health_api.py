from sqlalchemy.exc import OperationalError

from clerva.ai.factory import get_ai_adapter
from clerva.db.session import get_db


class _ConnectedAdapter:
    is_fallback = False


class _BrokenSession:
    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


def test_health_reports_degraded_without_ai_key(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["database"] == "connected"
    assert body["services"]["ai"] == "fallback"
    assert body["version"] == "0.1.0"
    assert body["environment"] == "test"
    assert body["uptime"] > 0
    assert body["timestamp"].endswith("+00:00")


def test_health_is_healthy_with_ai_provider(app, client):
    app.dependency_overrides[get_ai_adapter] = lambda: _ConnectedAdapter()
    body = client.get("/api/health").json()
    assert body["status"] == "healthy"
    assert body["services"] == {"database": "connected", "ai": "available"}


def test_health_sets_no_cache_headers(client):
    response = client.get("/api/health")
    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert response.headers["pragma"] == "no-cache"
    assert response.headers["expires"] == "0"


def test_health_accepts_post(client):
    assert client.post("/api/health").status_code == 200


def test_health_unhealthy_when_database_down(app, client):
    def _broken_db():
        yield _BrokenSession()

    app.dependency_overrides[get_db] = _broken_db
    response = client.get("/api/health")
    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["database"] == "disconnected"
