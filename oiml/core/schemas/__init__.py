from .registry import SchemaLocation, SchemaRegistry
from .validator_cache import CacheKey, CompiledValidator, SchemaViolation, ValidatorCache

__all__ = [
    "CacheKey",
    "CompiledValidator",
    "SchemaLocation",
    "SchemaRegistry",
    "SchemaViolation",
    "ValidatorCache",
]
