import json

import pytest

from oiml.core.compat.matrix import load_matrix, parse_matrix
from oiml.core.config import PACKAGED_MATRIX_FILE
from oiml.core.errors import MatrixLoadError, RangeSyntaxError

ENTRY = {
    "framework": "prisma",
    "category": "database",
    "versions": [
        {
            "template_version": "1.0.0",
            "pack_name": "prisma-postgres",
            "compat": {"oiml": ">=0.1.0 <0.2.0", "prisma": ">=5.0.0 <6.0.0"},
            "breaking_changes": [],
        }
    ],
}


def test_packaged_matrix_loads():
    matrix = load_matrix(PACKAGED_MATRIX_FILE)
    frameworks = {e.framework for e in matrix}
    assert {"prisma", "next", "express"} <= frameworks
    assert isinstance(matrix, tuple)


def test_load_json_file(tmp_path):
    f = tmp_path / "matrix.json"
    f.write_text(json.dumps([ENTRY]), encoding="utf-8")
    matrix = load_matrix(f)
    assert matrix[0].versions[0].pack_name == "prisma-postgres"


def test_load_yaml_file(tmp_path):
    f = tmp_path / "matrix.yaml"
    f.write_text(
        "- framework: drizzle\n"
        "  category: database\n"
        "  versions:\n"
        "    - template_version: 0.1.0\n"
        "      pack_name: drizzle-postgres\n"
        "      compat: {oiml: '>=0.1.0 <0.2.0'}\n",
        encoding="utf-8",
    )
    matrix = load_matrix(f)
    assert matrix[0].framework == "drizzle"
    assert matrix[0].versions[0].breaking_changes == ()


def test_env_var_overrides_default(tmp_path, monkeypatch):
    f = tmp_path / "env_matrix.json"
    f.write_text(json.dumps([dict(ENTRY, framework="remix")]), encoding="utf-8")
    monkeypatch.setenv("OIML_COMPAT_MATRIX", str(f))
    assert load_matrix()[0].framework == "remix"


def test_workspace_matrix_is_preferred_over_packaged(tmp_path, monkeypatch):
    (tmp_path / "compatibility").mkdir()
    (tmp_path / "compatibility" / "matrix.json").write_text(json.dumps([dict(ENTRY, framework="nuxt")]), encoding="utf-8")
    monkeypatch.delenv("OIML_COMPAT_MATRIX", raising=False)
    monkeypatch.chdir(tmp_path)
    assert load_matrix()[0].framework == "nuxt"


def test_missing_file_raises(tmp_path):
    with pytest.raises(MatrixLoadError):
        load_matrix(tmp_path / "absent.json")


def test_non_list_raises(tmp_path):
    f = tmp_path / "m.json"
    f.write_text(json.dumps({"framework": "prisma"}), encoding="utf-8")
    with pytest.raises(MatrixLoadError):
        load_matrix(f)


def test_unparseable_file_raises(tmp_path):
    f = tmp_path / "m.yaml"
    f.write_text("- framework: [unclosed\n", encoding="utf-8")
    with pytest.raises(MatrixLoadError):
        load_matrix(f)


def test_unknown_keys_are_rejected():
    with pytest.raises(MatrixLoadError):
        parse_matrix([dict(ENTRY, owner="platform")])


def test_missing_oiml_range_is_rejected():
    entry = json.loads(json.dumps(ENTRY))
    del entry["versions"][0]["compat"]["oiml"]
    with pytest.raises(MatrixLoadError):
        parse_matrix([entry])


def test_bad_template_version_is_rejected():
    entry = json.loads(json.dumps(ENTRY))
    entry["versions"][0]["template_version"] = "1.0"
    with pytest.raises(MatrixLoadError):
        parse_matrix([entry])


def test_bad_range_fails_at_load_time():
    entry = json.loads(json.dumps(ENTRY))
    entry["versions"][0]["compat"]["prisma"] = "^5.0.0"
    with pytest.raises(RangeSyntaxError) as ei:
        parse_matrix([entry])
    assert "prisma/database@1.0.0" in str(ei.value)
