from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from oiml.core.compat.matrix import Matrix, load_matrix
from oiml.core.compat.resolver import CompatibilityResolver, Resolution
from oiml.core.config import Settings
from oiml.core.ir.transform import TransformContext, TransformReport, transform_document
from oiml.core.schemas.registry import SchemaRegistry
from oiml.core.schemas.validator_cache import ValidatorCache
from oiml.core.validation.validator import IntentValidator, PlanValidator, ProjectValidator, ValidationResult

_log = logging.getLogger("oiml.engine")


class Engine:
    """
    One registry, one validator cache and one loaded matrix, shared by every
    call. Constructed once at startup and handed to whatever needs it.
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        *,
        cache: Optional[ValidatorCache] = None,
        matrix: Optional[Matrix] = None,
        matrix_path: Optional[Path] = None,
        template_selection: str = "declared",
    ):
        self.registry = registry
        self.cache = cache or ValidatorCache()
        self.matrix_path = matrix_path
        self.template_selection = template_selection
        self._matrix_lock = threading.Lock()
        self._resolver = CompatibilityResolver(
            matrix if matrix is not None else load_matrix(matrix_path),
            selection=template_selection,
        )

        self.intents = IntentValidator(self.registry, self.cache)
        self.projects = ProjectValidator(self.registry, self.cache)
        self.plans = PlanValidator(self.registry, self.cache)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Engine":
        settings = settings or Settings.from_env()
        _log.info(
            "Starting engine env=%s schema_roots=%s selection=%s",
            settings.env,
            [str(r) for r in settings.all_schema_roots()],
            settings.template_selection,
        )
        return cls(
            SchemaRegistry(settings.all_schema_roots()),
            matrix_path=settings.matrix_path,
            template_selection=settings.template_selection,
        )

    @property
    def resolver(self) -> CompatibilityResolver:
        return self._resolver

    def validate_intent(self, document: Any, context: Optional[TransformContext] = None) -> ValidationResult:
        if context is None:
            return self.intents.validate(document)
        return IntentValidator(self.registry, self.cache, context=context).validate(document)

    def validate_project(self, document: Any) -> ValidationResult:
        return self.projects.validate(document)

    def validate_plan(self, document: Any) -> ValidationResult:
        return self.plans.validate(document)

    def transform(self, document: Dict[str, Any], context: Optional[TransformContext] = None) -> TransformReport:
        return transform_document(document, context)

    def resolve_template(
        self,
        oiml_version: str,
        framework: str,
        framework_version: str,
        category: Optional[str] = None,
    ) -> Resolution:
        return self._resolver.resolve(oiml_version, framework, framework_version, category)

    def reload_matrix(self) -> int:
        """Re-read the matrix and swap the resolver atomically. Returns the entry count."""
        with self._matrix_lock:
            matrix = load_matrix(self.matrix_path)
            self._resolver = CompatibilityResolver(matrix, selection=self.template_selection)
        return len(matrix)

    def cache_stats(self) -> Dict[str, int]:
        return self.cache.stats()
