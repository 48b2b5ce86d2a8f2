from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from sessionauth.core.observability import install_observability


def test_health_and_metrics_are_served(app):
    install_observability(app, registry=CollectorRegistry())
    with TestClient(app) as client:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}

        metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "http_requests_total" in metrics.text
    assert 'handler="/health"' in metrics.text


def test_operational_routes_do_not_touch_the_session(app):
    install_observability(app, registry=CollectorRegistry())
    with TestClient(app) as client:
        client.get("/health")
        assert not client.cookies
