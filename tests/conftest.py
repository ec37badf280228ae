import copy
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from oiml.api.deps import get_engine
from oiml.api.main import app
from oiml.core.compat.matrix import load_matrix
from oiml.core.config import PACKAGED_MATRIX_FILE, PACKAGED_SCHEMAS_DIR
from oiml.core.engine import Engine
from oiml.core.observability.metrics import reset_metrics
from oiml.core.schemas.registry import SchemaRegistry
from oiml.core.schemas.validator_cache import ValidatorCache

_INTENT = {
    "version": "0.1.0",
    "type": "oiml.intent",
    "intents": [
        {
            "kind": "add_entity",
            "scope": "data",
            "entity": "Post",
            "fields": [
                {"name": "id", "type": "uuid", "required": True},
                {"name": "title", "type": "string", "required": True, "max_length": 200},
                {"name": "status", "type": "enum", "enum_values": ["draft", "published"], "default": "draft"},
                {"name": "created_at", "type": "datetime", "default": "now"},
                {
                    "name": "author_id",
                    "type": "uuid",
                    "required": True,
                    "relation": {
                        "target_entity": "User",
                        "kind": "many_to_one",
                        "foreign_key": {"local_field": "author_id", "target_field": "id"},
                        "reverse": {"field_name": "posts"},
                    },
                },
            ],
        }
    ],
}

_PROJECT = {
    "version": "0.1.0",
    "name": "blogger",
}

_PLAN = {
    "version": "0.1.0",
    "created_at": "2025-11-17T23:22:27.000Z",
    "intent_id": "sha256:0123456789abcdef",
    "intents_to_process": 1,
    "template_used": {"framework": "prisma", "category": "database", "pack": "prisma-postgres", "version": "1.1.0"},
    "steps": [
        {
            "kind": "add_entity",
            "scope": "data",
            "target": "Post",
            "description": "Add the Post model",
            "changes": [{"file": "prisma/schema.prisma", "action": "modify", "description": "Add model Post"}],
        }
    ],
    "planned_changes": [{"file": "prisma/schema.prisma", "action": "modify", "description": "Add model Post"}],
}


@pytest.fixture(autouse=True)
def _reset_named_counters():
    reset_metrics()
    yield


@pytest.fixture()
def intent_doc():
    return copy.deepcopy(_INTENT)


@pytest.fixture()
def project_doc():
    return copy.deepcopy(_PROJECT)


@pytest.fixture()
def plan_doc():
    return copy.deepcopy(_PLAN)


@pytest.fixture(scope="session")
def packaged_matrix():
    return load_matrix(PACKAGED_MATRIX_FILE)


@pytest.fixture()
def registry():
    return SchemaRegistry([PACKAGED_SCHEMAS_DIR])


@pytest.fixture()
def engine(registry, packaged_matrix):
    return Engine(registry, cache=ValidatorCache(), matrix=packaged_matrix)


@pytest.fixture()
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_engine, None)


@pytest.fixture()
def write_schema():
    """Writes <root>/<name>/<version>/schema.json and returns the root."""

    def _write(root: Path, name: str, version: str, schema) -> Path:
        d = root / name / version
        d.mkdir(parents=True, exist_ok=True)
        body = schema if isinstance(schema, str) else json.dumps(schema)
        (d / "schema.json").write_text(body, encoding="utf-8")
        return root

    return _write
