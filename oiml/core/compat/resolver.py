from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from oiml.core.compat.matrix import MatrixEntry, TemplateVersion
from oiml.core.compat.semver_range import parse_version, satisfies_range
from oiml.core.config import TEMPLATE_SELECTIONS
from oiml.core.errors import VersionSyntaxError
from oiml.core.hashing import canonical_json_bytes, sha256_hex
from oiml.core.observability.metrics import record_resolution

_log = logging.getLogger("oiml.compat")

# applied when a template version does not constrain the framework itself
DEFAULT_FRAMEWORK_RANGE = ">=0.0.0"


@dataclass(frozen=True)
class TemplateDescriptor:
    framework: str
    category: str
    pack_name: str
    pack_uri: str
    template_version: str
    digest: str
    compat: Dict[str, str]
    breaking_changes: Tuple[str, ...] = ()

    compatible = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compatible": True,
            "framework": self.framework,
            "category": self.category,
            "template_pack": self.pack_uri,
            "template_version": self.template_version,
            "digest": self.digest,
            "compat": dict(self.compat),
            "breaking_changes": list(self.breaking_changes),
            "message": f"Compatible template found: {self.pack_name}@{self.template_version}",
        }


@dataclass(frozen=True)
class Incompatible:
    reason: str
    error: str
    available_frameworks: Optional[List[str]] = None
    # every candidate's own ranges, for diagnosis
    candidates: Optional[List[Dict[str, Any]]] = None
    context: Dict[str, str] = field(default_factory=dict)

    compatible = False

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"compatible": False, "error": self.error, "reason": self.reason}
        out.update(self.context)
        if self.available_frameworks is not None:
            out["available_frameworks"] = list(self.available_frameworks)
        if self.candidates is not None:
            out["available_template_versions"] = list(self.candidates)
        return out


Resolution = Union[TemplateDescriptor, Incompatible]


def template_digest(template: TemplateVersion) -> str:
    return "sha256-" + sha256_hex(canonical_json_bytes(template.model_dump(mode="json")))


def _unique(names: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for n in names:
        if n not in seen:
            seen.append(n)
    return seen


class CompatibilityResolver:
    """
    Picks the template pack for (OIML version, framework, framework version).

    Stateless over an immutable matrix. Selection:
      declared  the last satisfying version in declaration order
      highest   the satisfying version with the greatest template_version
    """

    def __init__(self, matrix: Sequence[MatrixEntry], *, selection: str = "declared"):
        if selection not in TEMPLATE_SELECTIONS:
            raise ValueError(f"Unknown template selection {selection!r}; expected one of {TEMPLATE_SELECTIONS}")
        self.matrix: Tuple[MatrixEntry, ...] = tuple(matrix)
        self.selection = selection

    def frameworks(self) -> List[str]:
        return _unique([e.framework for e in self.matrix])

    def resolve(
        self,
        oiml_version: str,
        framework: str,
        framework_version: str,
        category: Optional[str] = None,
    ) -> Resolution:
        result = self._resolve(oiml_version, framework, framework_version, category)
        outcome = "compatible" if result.compatible else result.reason
        record_resolution(framework, outcome)
        if result.compatible:
            _log.info("Resolved template %s for %s@%s", result.pack_uri, framework, framework_version)
        else:
            _log.info("No template for %s@%s (OIML %s): %s", framework, framework_version, oiml_version, result.error)
        return result

    def _resolve(
        self,
        oiml_version: str,
        framework: str,
        framework_version: str,
        category: Optional[str],
    ) -> Resolution:
        query = {
            "framework": framework,
            "framework_version": framework_version,
            "intent_schema_version": oiml_version,
        }

        entry = self._entry_for(framework, category)
        if entry is None:
            return Incompatible(
                reason="framework_not_found",
                error=f'Framework "{framework}" not found in compatibility matrix',
                available_frameworks=self.frameworks(),
            )

        for label, raw in (("OIML", oiml_version), (framework, framework_version)):
            try:
                parse_version(raw)
            except VersionSyntaxError as exc:
                return Incompatible(reason="invalid_version", error=f"Invalid {label} version: {exc}", context=query)

        candidates: List[TemplateVersion] = []
        for tv in entry.versions:
            # matrix ranges are trusted; a RangeSyntaxError here is a deployment fault
            if not satisfies_range(oiml_version, tv.compat["oiml"]):
                continue
            if not satisfies_range(framework_version, tv.compat.get(framework, DEFAULT_FRAMEWORK_RANGE)):
                continue
            candidates.append(tv)

        if not candidates:
            return Incompatible(
                reason="no_compatible_template",
                error=f"No compatible template found for {framework}@{framework_version} with OIML {oiml_version}",
                candidates=[
                    {"version": tv.template_version, "category": entry.category, "compat": dict(tv.compat)}
                    for tv in entry.versions
                ],
                context=query,
            )

        template = self._select(candidates)
        return TemplateDescriptor(
            framework=entry.framework,
            category=entry.category,
            pack_name=template.pack_name,
            pack_uri=f"oiml://compat/{template.pack_name}/{template.template_version}",
            template_version=template.template_version,
            digest=template_digest(template),
            compat=dict(template.compat),
            breaking_changes=tuple(template.breaking_changes),
        )

    def _entry_for(self, framework: str, category: Optional[str]) -> Optional[MatrixEntry]:
        # first declared entry wins; a framework listed under several categories
        # needs the category to reach the later ones
        for entry in self.matrix:
            if entry.framework == framework and (not category or entry.category == category):
                return entry
        return None

    def _select(self, candidates: List[TemplateVersion]) -> TemplateVersion:
        if self.selection == "highest":
            # ties keep the later declaration
            ranked = max(enumerate(candidates), key=lambda ic: (parse_version(ic[1].template_version), ic[0]))
            return ranked[1]
        return candidates[-1]
