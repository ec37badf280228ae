from .matrix import Matrix, MatrixEntry, TemplateVersion, load_matrix, parse_matrix
from .resolver import CompatibilityResolver, Incompatible, Resolution, TemplateDescriptor
from .semver_range import VersionRange, parse_range, parse_version, satisfies_range

__all__ = [
    "CompatibilityResolver",
    "Incompatible",
    "Matrix",
    "MatrixEntry",
    "Resolution",
    "TemplateDescriptor",
    "TemplateVersion",
    "VersionRange",
    "load_matrix",
    "parse_matrix",
    "parse_range",
    "parse_version",
    "satisfies_range",
]
