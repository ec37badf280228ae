from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

from oiml.core.compat.semver_range import parse_version
from oiml.core.errors import VersionSyntaxError
from oiml.core.hashing import content_id
from oiml.core.ir.transform import TransformContext, TransformReport, transform_document
from oiml.core.observability.metrics import record_validation
from oiml.core.schemas.registry import SchemaRegistry
from oiml.core.schemas.validator_cache import ValidatorCache

_log = logging.getLogger("oiml.validation")

INTENT_SCHEMA = "oiml.intent"
PROJECT_SCHEMA = "oiml.project"
PLAN_SCHEMA = "oiml.plan"

PLAN_STRING_ARRAYS = ("mitigations", "factors", "warnings")


def missing_version_message(family: str) -> str:
    return (
        f'Missing "version" field in {family} file. '
        "The version field is required to determine which schema to validate against."
    )


def invalid_version_message(family: str, version: str) -> str:
    return f'Invalid "version" field in {family} file: {version!r} is not a MAJOR.MINOR.PATCH schema version.'


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    message: Optional[str] = None
    schema_version: Optional[str] = None
    # intent-only
    intent_id: Optional[str] = None
    ir: Optional[List[dict]] = None
    ir_available: Optional[bool] = None
    # plan-only
    plan: Optional[Dict[str, Any]] = None
    # full lowering report behind `ir`; not part of the wire shape
    transform_report: Optional[TransformReport] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.valid:
            out: Dict[str, Any] = {"valid": False, "errors": list(self.errors)}
            if self.schema_version is not None:
                out["schemaVersion"] = self.schema_version
            return out

        out = {"valid": True, "message": self.message, "schemaVersion": self.schema_version}
        if self.ir is not None:
            out["ir"] = self.ir
        if self.ir_available is not None:
            out["irAvailable"] = self.ir_available
        if self.intent_id is not None:
            out["intentId"] = self.intent_id
        if self.plan is not None:
            out["plan"] = self.plan
        return out


def _declared_version(document: Any) -> Optional[str]:
    if not isinstance(document, Mapping):
        return None
    version = document.get("version")
    if version is None or version == "":
        return None
    return str(version)


class DocumentValidator:
    """
    Validates one document family against its versioned schema.

    The declared `version` picks the schema directory; the compiled validator
    comes from the shared cache. Registry and compile faults propagate.
    """

    family = "document"
    label = "OIML"

    def __init__(self, schema_name: str, registry: SchemaRegistry, cache: ValidatorCache):
        self.schema_name = schema_name
        self.registry = registry
        self.cache = cache

    def prepare(self, document: Any) -> Any:
        return document

    def success(self, document: Mapping[str, Any], version: str) -> ValidationResult:
        return ValidationResult(
            valid=True,
            message=f"File is valid according to {self.label} Schema v{version}",
            schema_version=version,
        )

    def validate(self, document: Any) -> ValidationResult:
        document = self.prepare(document)

        version = _declared_version(document)
        if version is None:
            record_validation(self.schema_name, "missing_version")
            return ValidationResult(valid=False, errors=[missing_version_message(self.family)])

        # the version becomes a path segment under each schema root
        try:
            parse_version(version)
        except VersionSyntaxError:
            record_validation(self.schema_name, "invalid_version")
            return ValidationResult(valid=False, errors=[invalid_version_message(self.family, version)])

        location = self.registry.resolve(self.schema_name, version)
        compiled = self.cache.compile(
            self.registry.read_schema(location),
            schema_name=self.schema_name,
            version=version,
        )

        violations = compiled.violations(document)
        if violations:
            _log.info("%s@%s: %d violation(s)", self.schema_name, version, len(violations))
            record_validation(self.schema_name, "invalid")
            return ValidationResult(
                valid=False,
                errors=[v.render() for v in violations],
                schema_version=version,
            )

        record_validation(self.schema_name, "valid")
        return self.success(document, version)


class IntentValidator(DocumentValidator):
    family = "intent"
    label = "OIML Intent"

    def __init__(
        self,
        registry: SchemaRegistry,
        cache: ValidatorCache,
        *,
        context: Optional[TransformContext] = None,
    ):
        super().__init__(INTENT_SCHEMA, registry, cache)
        self.context = context

    def success(self, document: Mapping[str, Any], version: str) -> ValidationResult:
        result = super().success(document, version)
        result.intent_id = content_id(document)

        ctx = self.context or TransformContext()
        if ctx.intent_id is None:
            ctx = replace(ctx, intent_id=result.intent_id)

        report = transform_document(document, ctx)
        result.transform_report = report
        result.ir = report.ir_wire()
        result.ir_available = report.available
        return result


class ProjectValidator(DocumentValidator):
    family = "project"
    label = "OIML Project"

    def __init__(self, registry: SchemaRegistry, cache: ValidatorCache):
        super().__init__(PROJECT_SCHEMA, registry, cache)


def normalize_string_arrays(obj: Any, keys=PLAN_STRING_ARRAYS) -> Any:
    """
    Coerce known string-array fields so YAML scalars ("3", true, null) do not
    fail validation. Walks the whole tree; returns a copy.
    """
    if isinstance(obj, list):
        return [normalize_string_arrays(v, keys) for v in obj]
    if not isinstance(obj, dict):
        return obj

    out: Dict[str, Any] = {}
    for k, v in obj.items():
        if k in keys and isinstance(v, list):
            out[k] = ["" if item is None else item if isinstance(item, str) else _stringify(item) for item in v]
        else:
            out[k] = normalize_string_arrays(v, keys)
    return out


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PlanValidator(DocumentValidator):
    family = "plan"
    label = "OIML Implementation Plan"

    def __init__(self, registry: SchemaRegistry, cache: ValidatorCache):
        super().__init__(PLAN_SCHEMA, registry, cache)

    def prepare(self, document: Any) -> Any:
        return normalize_string_arrays(document)

    def success(self, document: Mapping[str, Any], version: str) -> ValidationResult:
        risk = document.get("risk_assessment") or {}
        return ValidationResult(
            valid=True,
            message=f"Plan is valid according to {self.label} Schema v{version}",
            schema_version=version,
            plan={
                "intent_id": document.get("intent_id"),
                "intents_to_process": document.get("intents_to_process"),
                "template": document.get("template_used"),
                "steps": len(document.get("steps") or []),
                "planned_changes": len(document.get("planned_changes") or []),
                "risk_level": risk.get("level") or "not_assessed",
            },
        )
