import json
import os
from pathlib import Path

from oiml.core.config import PACKAGED_SCHEMAS_DIR, Settings
from oiml.core.engine import Engine


def test_settings_defaults(monkeypatch, tmp_path):
    for var in ("OIML_ENV", "OIML_SCHEMA_PATH", "OIML_COMPAT_MATRIX", "OIML_TEMPLATE_SELECTION"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)

    s = Settings.from_env()
    assert s.env == "dev"
    assert s.matrix_path is None
    assert s.template_selection == "declared"
    assert s.all_schema_roots() == [Path.cwd() / "schemas", PACKAGED_SCHEMAS_DIR]


def test_settings_from_env(monkeypatch, tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    monkeypatch.setenv("OIML_ENV", " PROD ")
    monkeypatch.setenv("OIML_SCHEMA_PATH", f"{a}{os.pathsep}{b}")
    monkeypatch.setenv("OIML_COMPAT_MATRIX", str(tmp_path / "m.json"))
    monkeypatch.setenv("OIML_TEMPLATE_SELECTION", "highest")

    s = Settings.from_env()
    assert s.env == "prod"
    assert s.schema_roots[:2] == [a, b]
    assert s.matrix_path == tmp_path / "m.json"
    assert s.template_selection == "highest"


def test_unknown_selection_falls_back(monkeypatch):
    monkeypatch.setenv("OIML_TEMPLATE_SELECTION", "newest")
    assert Settings.from_env().template_selection == "declared"


def test_engine_from_settings_uses_workspace_schemas(tmp_path, write_schema, intent_doc):
    strict = {"type": "object", "required": ["owner"]}
    write_schema(tmp_path / "schemas", "oiml.intent", "0.1.0", strict)
    settings = Settings(schema_roots=[tmp_path / "schemas"])

    engine = Engine.from_settings(settings)
    result = engine.validate_intent(intent_doc)

    assert result.valid is False
    assert result.errors == ["/: 'owner' is a required property"]


def test_engine_selection_reaches_resolver(tmp_path):
    matrix = tmp_path / "m.json"
    tv = {"pack_name": "p", "compat": {"oiml": ">=0.1.0 <0.2.0"}}
    matrix.write_text(
        json.dumps(
            [
                {
                    "framework": "next",
                    "category": "api",
                    "versions": [dict(tv, template_version="2.0.0"), dict(tv, template_version="1.0.0")],
                }
            ]
        ),
        encoding="utf-8",
    )
    settings = Settings(matrix_path=matrix, template_selection="highest")
    engine = Engine.from_settings(settings)
    assert engine.resolve_template("0.1.0", "next", "15.0.0").template_version == "2.0.0"


def test_engine_shares_one_cache_across_families(engine, intent_doc, project_doc):
    engine.validate_intent(intent_doc)
    engine.validate_project(project_doc)
    engine.validate_intent(intent_doc)
    assert engine.cache_stats() == {"hits": 1, "misses": 2, "size": 2}

