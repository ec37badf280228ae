from pathlib import Path

import pytest

from oiml.core.config import PACKAGED_SCHEMAS_DIR
from oiml.core.errors import SchemaIncomplete, SchemaNotFound
from oiml.core.schemas.registry import SchemaRegistry


def test_packaged_schemas_resolve():
    reg = SchemaRegistry([PACKAGED_SCHEMAS_DIR])
    for name in ("oiml.intent", "oiml.project", "oiml.plan"):
        loc = reg.resolve(name, "0.1.0")
        assert loc.schema_file.is_file()
        assert reg.read_schema(loc).startswith(b"{")


def test_workspace_root_wins_over_packaged(tmp_path, write_schema):
    workspace = write_schema(tmp_path / "ws", "oiml.intent", "0.1.0", {"type": "object"})
    reg = SchemaRegistry([workspace, PACKAGED_SCHEMAS_DIR])

    loc = reg.resolve("oiml.intent", "0.1.0")
    assert loc.root == workspace
    assert reg.read_schema(loc) == b'{"type": "object"}'


def test_falls_through_to_later_root(tmp_path, write_schema):
    empty = tmp_path / "empty"
    empty.mkdir()
    reg = SchemaRegistry([empty, PACKAGED_SCHEMAS_DIR])
    assert reg.resolve("oiml.intent", "0.1.0").root == PACKAGED_SCHEMAS_DIR


def test_not_found_lists_every_searched_location(tmp_path):
    a, b = tmp_path / "a", tmp_path / "b"
    reg = SchemaRegistry([a, b, PACKAGED_SCHEMAS_DIR])

    with pytest.raises(SchemaNotFound) as ei:
        reg.resolve("oiml.intent", "9.9.9")

    err = ei.value
    assert err.searched == [
        str(a / "oiml.intent" / "9.9.9"),
        str(b / "oiml.intent" / "9.9.9"),
        str(PACKAGED_SCHEMAS_DIR / "oiml.intent" / "9.9.9"),
    ]
    assert "0.1.0" in err.available_versions
    assert "9.9.9" in str(err)


def test_incomplete_directory_raises(tmp_path):
    (tmp_path / "oiml.intent" / "0.2.0").mkdir(parents=True)
    reg = SchemaRegistry([tmp_path])

    with pytest.raises(SchemaIncomplete) as ei:
        reg.resolve("oiml.intent", "0.2.0")
    assert ei.value.missing == ["schema.json"]


def test_misses_are_not_cached(tmp_path, write_schema):
    reg = SchemaRegistry([tmp_path])
    with pytest.raises(SchemaNotFound):
        reg.resolve("oiml.project", "0.3.0")

    write_schema(tmp_path, "oiml.project", "0.3.0", {"type": "object"})
    assert reg.resolve("oiml.project", "0.3.0").version == "0.3.0"


def test_injected_io_is_used():
    files = {
        Path("/virtual/oiml.intent/1.0.0/schema.json"): b"{}",
    }
    listing = {
        Path("/virtual"): ["oiml.intent"],
        Path("/virtual/oiml.intent"): ["1.0.0"],
        Path("/virtual/oiml.intent/1.0.0"): ["schema.json"],
    }
    reg = SchemaRegistry(
        [Path("/virtual")],
        read_bytes=lambda p: files[Path(p)],
        list_directory=lambda p: listing.get(Path(p), []),
    )

    loc = reg.resolve("oiml.intent", "1.0.0")
    assert reg.read_schema(loc) == b"{}"
    assert reg.available_versions("oiml.intent") == ["1.0.0"]


@pytest.mark.parametrize("version", ["../0.1.0", "..", "0.1.0/../../x", "a\\b"])
def test_path_like_versions_never_leave_the_roots(tmp_path, write_schema, version):
    roots = tmp_path / "roots"
    write_schema(tmp_path, "outside", "x", {"type": "object"})
    reg = SchemaRegistry([roots / "ws"])

    with pytest.raises(SchemaNotFound) as ei:
        reg.resolve("oiml.intent", version)
    assert ei.value.searched == []
