import pytest

from oiml.core.compat.matrix import parse_matrix
from oiml.core.compat.resolver import CompatibilityResolver, Incompatible, TemplateDescriptor, template_digest
from oiml.core.errors import RangeSyntaxError
from oiml.core.hashing import canonical_json_bytes, sha256_hex
from oiml.core.observability.metrics import snapshot_named


def _matrix(*entries):
    return parse_matrix(list(entries))


def _tv(version, fw_range, pack="pack", oiml=">=0.1.0 <0.2.0", fw="prisma", breaking=()):
    compat = {"oiml": oiml}
    if fw_range is not None:
        compat[fw] = fw_range
    return {"template_version": version, "pack_name": pack, "compat": compat, "breaking_changes": list(breaking)}


PRISMA = {
    "framework": "prisma",
    "category": "database",
    "versions": [
        _tv("1.0.0", ">=5.0.0 <6.0.0", pack="prisma-postgres"),
        _tv("1.1.0", ">=6.0.0 <7.0.0", pack="prisma-postgres", breaking=["explicit referential actions"]),
    ],
}


def test_resolves_the_covering_version():
    resolver = CompatibilityResolver(_matrix(PRISMA))
    result = resolver.resolve("0.1.0", "prisma", "6.19.0")

    assert isinstance(result, TemplateDescriptor)
    body = result.to_dict()
    assert body["compatible"] is True
    assert body["framework"] == "prisma"
    assert body["category"] == "database"
    assert body["template_version"] == "1.1.0"
    assert body["template_pack"] == "oiml://compat/prisma-postgres/1.1.0"
    assert body["compat"] == {"oiml": ">=0.1.0 <0.2.0", "prisma": ">=6.0.0 <7.0.0"}
    assert body["breaking_changes"] == ["explicit referential actions"]


def test_digest_is_hash_of_selected_entry():
    matrix = _matrix(PRISMA)
    result = CompatibilityResolver(matrix).resolve("0.1.0", "prisma", "6.19.0")

    selected = PRISMA["versions"][1]
    assert result.digest == "sha256-" + sha256_hex(canonical_json_bytes(selected))
    assert result.digest == template_digest(matrix[0].versions[1])


def test_unknown_framework_lists_available():
    matrix = _matrix(PRISMA, dict(PRISMA, framework="drizzle"), dict(PRISMA, category="other"))
    result = CompatibilityResolver(matrix).resolve("0.1.0", "unknown-framework", "1.0.0")

    assert isinstance(result, Incompatible)
    body = result.to_dict()
    assert body["compatible"] is False
    assert body["available_frameworks"] == ["prisma", "drizzle"]
    assert "unknown-framework" in body["error"]


def test_category_filters_entries():
    resolver = CompatibilityResolver(_matrix(PRISMA))
    assert resolver.resolve("0.1.0", "prisma", "6.0.0", category="database").compatible
    result = resolver.resolve("0.1.0", "prisma", "6.0.0", category="api")
    assert result.reason == "framework_not_found"


def test_no_compatible_template_lists_candidates():
    result = CompatibilityResolver(_matrix(PRISMA)).resolve("0.1.0", "prisma", "7.0.0")

    body = result.to_dict()
    assert body["compatible"] is False
    assert result.reason == "no_compatible_template"
    assert [c["version"] for c in body["available_template_versions"]] == ["1.0.0", "1.1.0"]
    assert body["available_template_versions"][0]["compat"]["prisma"] == ">=5.0.0 <6.0.0"
    assert body["framework_version"] == "7.0.0"


def test_oiml_version_must_also_match():
    result = CompatibilityResolver(_matrix(PRISMA)).resolve("0.2.0", "prisma", "6.1.0")
    assert result.compatible is False


def test_missing_framework_range_defaults_to_any():
    matrix = _matrix({"framework": "express", "category": "api", "versions": [_tv("1.0.0", None, fw="express")]})
    assert CompatibilityResolver(matrix).resolve("0.1.0", "express", "0.0.1").template_version == "1.0.0"


UNSORTED = {
    "framework": "next",
    "category": "api",
    "versions": [
        _tv("2.0.0", ">=14.0.0 <16.0.0", fw="next"),
        _tv("1.0.0", ">=14.0.0 <16.0.0", fw="next"),
    ],
}


def test_declared_selection_takes_the_last_match():
    resolver = CompatibilityResolver(_matrix(UNSORTED))
    assert resolver.resolve("0.1.0", "next", "15.0.0").template_version == "1.0.0"


def test_highest_selection_takes_the_greatest_version():
    resolver = CompatibilityResolver(_matrix(UNSORTED), selection="highest")
    assert resolver.resolve("0.1.0", "next", "15.0.0").template_version == "2.0.0"


def test_unknown_selection_is_rejected():
    with pytest.raises(ValueError):
        CompatibilityResolver((), selection="newest")


def test_first_matching_entry_is_used():
    ui = {"framework": "next", "category": "ui", "versions": [_tv("0.5.0", ">=14.0.0 <16.0.0", fw="next", pack="ui")]}
    resolver = CompatibilityResolver(_matrix(UNSORTED, ui))

    result = resolver.resolve("0.1.0", "next", "15.0.0")
    assert (result.category, result.template_version) == ("api", "1.0.0")
    assert resolver.resolve("0.1.0", "next", "15.0.0", category="ui").pack_name == "ui"


def test_later_entries_do_not_widen_the_candidates():
    ui = {"framework": "next", "category": "ui", "versions": [_tv("0.5.0", ">=16.0.0 <17.0.0", fw="next", pack="ui")]}
    result = CompatibilityResolver(_matrix(UNSORTED, ui)).resolve("0.1.0", "next", "16.1.0")

    assert result.reason == "no_compatible_template"
    body = result.to_dict()
    assert [(c["category"], c["version"]) for c in body["available_template_versions"]] == [
        ("api", "2.0.0"),
        ("api", "1.0.0"),
    ]


@pytest.mark.parametrize("oiml,fw", [("0.1", "6.0.0"), ("0.1.0", "6.0.0-beta.1"), ("latest", "6.0.0")])
def test_malformed_caller_versions_are_incompatible(oiml, fw):
    result = CompatibilityResolver(_matrix(PRISMA)).resolve(oiml, "prisma", fw)
    assert isinstance(result, Incompatible)
    assert result.reason == "invalid_version"


def test_malformed_matrix_range_raises():
    bad = PRISMA["versions"][0]
    entry = parse_matrix([PRISMA])[0]
    broken = entry.model_copy(
        update={"versions": (entry.versions[0].model_copy(update={"compat": dict(bad["compat"], prisma="^5.0.0")}),)}
    )
    with pytest.raises(RangeSyntaxError):
        CompatibilityResolver((broken,)).resolve("0.1.0", "prisma", "5.1.0")


def test_packaged_matrix_resolves(packaged_matrix):
    resolver = CompatibilityResolver(packaged_matrix)
    result = resolver.resolve("0.1.0", "prisma", "6.19.0")
    assert result.compatible
    assert result.template_version == "1.1.0"
    assert result.pack_uri == "oiml://compat/prisma-postgres/1.1.0"


def test_packaged_next_without_category_is_the_api_pack(packaged_matrix):
    resolver = CompatibilityResolver(packaged_matrix)

    result = resolver.resolve("0.1.0", "next", "15.0.0")
    assert (result.category, result.pack_name, result.template_version) == ("api", "next-app-router", "2.0.0")

    ui = resolver.resolve("0.1.0", "next", "15.0.0", category="ui")
    assert ui.pack_name == "next-shadcn"


def test_resolutions_are_counted():
    resolver = CompatibilityResolver(_matrix(PRISMA))
    resolver.resolve("0.1.0", "prisma", "6.0.0")
    resolver.resolve("0.1.0", "nope", "1.0.0")

    counters = snapshot_named()
    assert counters["resolve_compatible"] == 1
    assert counters["resolve_framework_not_found"] == 1
