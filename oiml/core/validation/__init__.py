from .parser import SUPPORTED_FORMATS, parse, unwrap_message_content
from .validator import (
    INTENT_SCHEMA,
    PLAN_SCHEMA,
    PROJECT_SCHEMA,
    DocumentValidator,
    IntentValidator,
    PlanValidator,
    ProjectValidator,
    ValidationResult,
)

__all__ = [
    "INTENT_SCHEMA",
    "PLAN_SCHEMA",
    "PROJECT_SCHEMA",
    "SUPPORTED_FORMATS",
    "DocumentValidator",
    "IntentValidator",
    "PlanValidator",
    "ProjectValidator",
    "ValidationResult",
    "parse",
    "unwrap_message_content",
]
