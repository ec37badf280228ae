"""Engine exceptions.

Only infrastructure faults (missing or corrupt schemas, unreadable matrix,
malformed ranges shipped in the matrix) are raised. Problems a caller can fix
in their own input are returned as result objects instead.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class OimlError(Exception):
    pass


class SchemaNotFound(OimlError):
    def __init__(
        self,
        *,
        schema_name: str,
        version: str,
        searched: Sequence[str],
        available_versions: Optional[Sequence[str]] = None,
    ):
        self.schema_name = schema_name
        self.version = version
        self.searched: List[str] = list(searched)
        self.available_versions: List[str] = list(available_versions or [])
        msg = f"Schema {schema_name}@{version} not found. Tried paths: {', '.join(self.searched) or '(none)'}"
        if self.available_versions:
            msg += f". Available versions: {', '.join(self.available_versions)}"
        super().__init__(msg)


class SchemaIncomplete(OimlError):
    def __init__(self, *, schema_name: str, version: str, location: str, missing: Sequence[str]):
        self.schema_name = schema_name
        self.version = version
        self.location = location
        self.missing: List[str] = list(missing)
        super().__init__(
            f"Schema {schema_name}@{version} is incomplete. "
            f"Missing files: {', '.join(self.missing)}. Expected location: {location}"
        )


class SchemaCompileError(OimlError):
    def __init__(self, *, cache_key: str, reason: str):
        self.cache_key = cache_key
        self.reason = reason
        super().__init__(f"Failed to compile schema {cache_key}: {reason}")


class DocumentParseError(OimlError):
    pass


class IRTransformError(OimlError):
    def __init__(self, message: str, *, diagnostics: Optional[list] = None):
        self.diagnostics = list(diagnostics or [])
        super().__init__(message)


class VersionSyntaxError(OimlError, ValueError):
    pass


class RangeSyntaxError(OimlError, ValueError):
    pass


class MatrixLoadError(OimlError):
    pass


class GuideUnavailable(OimlError):
    def __init__(self, message: str, *, searched: Sequence[str] = ()):
        self.searched: List[str] = list(searched)
        super().__init__(message)
