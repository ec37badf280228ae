from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from oiml.core.errors import SchemaIncomplete, SchemaNotFound

_log = logging.getLogger("oiml.schemas")

SCHEMA_FILE = "schema.json"
REQUIRED_FILES = (SCHEMA_FILE,)

ReadBytes = Callable[[Path], bytes]
ListDirectory = Callable[[Path], List[str]]


def _read_bytes(path: Path) -> bytes:
    return Path(path).read_bytes()


def _list_directory(path: Path) -> List[str]:
    p = Path(path)
    if not p.is_dir():
        return []
    return sorted(child.name for child in p.iterdir())


def _is_segment(name: str) -> bool:
    # names and versions are single directory names, never paths
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


@dataclass(frozen=True)
class SchemaLocation:
    schema_name: str
    version: str
    root: Path
    path: Path

    @property
    def schema_file(self) -> Path:
        return self.path / SCHEMA_FILE


class SchemaRegistry:
    """
    Resolves (schema name, version) to a schema directory.

    Layout under every root:
      <root>/<schema_name>/<version>/schema.json

    Roots are searched in order; workspace roots come first so a schema being
    edited locally wins over the copy packaged with the engine. Misses are not
    cached: each lookup re-checks the filesystem.
    """

    def __init__(
        self,
        roots: Sequence[Path],
        *,
        read_bytes: Optional[ReadBytes] = None,
        list_directory: Optional[ListDirectory] = None,
    ):
        self.roots: List[Path] = [Path(r) for r in roots]
        self._read_bytes = read_bytes or _read_bytes
        self._list_directory = list_directory or _list_directory

    def _candidates(self, schema_name: str, version: str) -> List[Path]:
        if not (_is_segment(schema_name) and _is_segment(version)):
            return []
        return [root / schema_name / version for root in self.roots]

    def resolve(self, schema_name: str, version: str) -> SchemaLocation:
        candidates = self._candidates(schema_name, version)

        for root, candidate in zip(self.roots, candidates):
            if not self._exists(candidate):
                continue

            present = set(self._list_directory(candidate))
            missing = [f for f in REQUIRED_FILES if f not in present]
            if missing:
                raise SchemaIncomplete(
                    schema_name=schema_name,
                    version=version,
                    location=str(candidate),
                    missing=missing,
                )

            _log.debug("Using schema %s@%s from %s", schema_name, version, candidate)
            return SchemaLocation(schema_name=schema_name, version=version, root=root, path=candidate)

        raise SchemaNotFound(
            schema_name=schema_name,
            version=version,
            searched=[str(c) for c in candidates],
            available_versions=self.available_versions(schema_name),
        )

    def read_schema(self, location: SchemaLocation) -> bytes:
        return self._read_bytes(location.schema_file)

    def available_versions(self, schema_name: str) -> List[str]:
        seen: List[str] = []
        for root in self.roots:
            for name in self._list_directory(root / schema_name):
                if name not in seen:
                    seen.append(name)
        return sorted(seen)

    def _exists(self, path: Path) -> bool:
        # existence goes through the injected lister only
        return path.name in self._list_directory(path.parent)
