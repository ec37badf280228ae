import logging

import pytest

from oiml.api.middleware.request_context import api_surface


def test_request_id_header_generated(client):
    r = client.get("/health/live")
    assert r.status_code == 200
    assert "X-Request-Id" in r.headers
    assert len(r.headers["X-Request-Id"]) > 10


def test_request_id_passthrough(client):
    rid = "test-rid-123"
    r = client.post(
        "/api/v1/templates/resolve",
        json={"intent_schema_version": "0.1.0", "framework": "prisma", "framework_version": "6.0.0"},
        headers={"X-Request-Id": rid},
    )
    assert r.headers.get("X-Request-Id") == rid


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/api/v1/intents/transform", ("v1", "intents", "transform")),
        ("/api/v1/templates", ("v1", "templates", None)),
        ("/health/live", (None, None, None)),
    ],
)
def test_api_surface(path, expected):
    assert api_surface(path) == expected


def test_request_log_names_the_surface(client, caplog):
    caplog.set_level(logging.INFO, logger="oiml.request")
    client.post(
        "/api/v1/templates/resolve",
        json={"intent_schema_version": "0.1.0", "framework": "prisma", "framework_version": "6.0.0"},
        headers={"X-Request-Id": "rid-surface"},
    )

    records = [r.getMessage() for r in caplog.records if r.name == "oiml.request"]
    assert len(records) == 1
    assert "'surface': 'templates'" in records[0]
    assert "'operation': 'resolve'" in records[0]
    assert "'request_id': 'rid-surface'" in records[0]
