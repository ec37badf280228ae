"""
Compatibility matrix loader.

The matrix is a JSON (or YAML) array of entries:

    - framework: prisma
      category: database
      versions:
        - template_version: 1.1.0
          pack_name: prisma-postgres
          compat: {oiml: ">=0.1.0 <0.2.0", prisma: ">=6.0.0 <7.0.0"}
          breaking_changes: []

Search order for the file:
    explicit path -> OIML_COMPAT_MATRIX -> <cwd>/compatibility/matrix.json -> packaged matrix

Unlike optional override files, a missing or malformed matrix is a deployment
fault and raises MatrixLoadError. Every range is parsed at load time so a bad
range fails here rather than on the first query that touches it.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from oiml.core.compat.semver_range import parse_range, parse_version
from oiml.core.config import PACKAGED_MATRIX_FILE
from oiml.core.errors import MatrixLoadError, RangeSyntaxError, VersionSyntaxError

_log = logging.getLogger("oiml.compat")


class TemplateVersion(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    template_version: str
    pack_name: str = Field(min_length=1)
    # dependency name -> range; "oiml" is always present
    compat: Dict[str, str]
    breaking_changes: Tuple[str, ...] = ()


class MatrixEntry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    framework: str = Field(min_length=1)
    category: str = Field(min_length=1)
    versions: Tuple[TemplateVersion, ...]


Matrix = Tuple[MatrixEntry, ...]


def _resolve_path(path: Optional[Path]) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.getenv("OIML_COMPAT_MATRIX", "").strip()
    if env_path:
        return Path(env_path)
    workspace = Path.cwd() / "compatibility" / "matrix.json"
    if workspace.exists():
        return workspace
    return PACKAGED_MATRIX_FILE


def _decode(text: str, source: Path):
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MatrixLoadError(f"Compatibility matrix {source} is neither valid JSON nor YAML: {exc}") from exc


def _check_ranges(entries: List[MatrixEntry], source: Path) -> None:
    for entry in entries:
        for tv in entry.versions:
            where = f"{entry.framework}/{entry.category}@{tv.template_version}"
            try:
                parse_version(tv.template_version)
            except VersionSyntaxError as exc:
                raise MatrixLoadError(f"{source}: {where}: {exc}") from exc
            if "oiml" not in tv.compat:
                raise MatrixLoadError(f"{source}: {where}: compat is missing the 'oiml' range")
            for dep, rng in tv.compat.items():
                try:
                    parse_range(rng)
                except RangeSyntaxError as exc:
                    raise RangeSyntaxError(f"{source}: {where}: compat[{dep}]: {exc}") from exc


def parse_matrix(data, source: Path = Path("<memory>")) -> Matrix:
    if not isinstance(data, list):
        raise MatrixLoadError(f"Compatibility matrix {source} must be a list, got {type(data).__name__}")
    try:
        entries = [MatrixEntry.model_validate(item) for item in data]
    except ValidationError as exc:
        raise MatrixLoadError(f"Compatibility matrix {source} is malformed: {exc}") from exc
    _check_ranges(entries, source)
    return tuple(entries)


def load_matrix(path: Optional[Path] = None) -> Matrix:
    resolved = _resolve_path(path)
    try:
        text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        raise MatrixLoadError(f"Cannot read compatibility matrix {resolved}: {exc}") from exc

    matrix = parse_matrix(_decode(text, resolved), resolved)
    _log.info(
        "Loaded compatibility matrix from %s (%d entries, %d template versions)",
        resolved,
        len(matrix),
        sum(len(e.versions) for e in matrix),
    )
    return matrix
