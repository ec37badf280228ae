"""Prometheus export endpoint contract tests.

Checks the scrape endpoint is reachable and exposes the engine's metric
names. Absolute counter values are process-wide and not asserted.
"""


def test_prometheus_metrics_endpoint_returns_200(client):
    client.get("/health/live")
    r = client.get("/metrics")
    assert r.status_code == 200
    assert "oiml_http_requests_total" in r.text


def test_engine_metrics_are_exported(client, intent_doc):
    client.post("/api/v1/intents/validate", json={"content": "{\"version\": \"0.1.0\", \"intents\": []}", "format": "json"})
    client.post(
        "/api/v1/templates/resolve",
        json={"intent_schema_version": "0.1.0", "framework": "prisma", "framework_version": "6.0.0"},
    )
    text = client.get("/metrics").text

    assert 'oiml_validations_total{schema="oiml.intent",outcome="invalid"}' in text
    assert "oiml_validator_cache_total" in text
    assert 'oiml_template_resolutions_total{framework="prisma",outcome="compatible"}' in text


def test_named_counters(client):
    client.get("/health/live")
    counters = client.get("/metrics/named").json()["counters"]
    assert counters["health_live"] == 1
