from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

# oiml/core/config.py -> parents[1] = oiml package dir
PACKAGE_ROOT = Path(__file__).resolve().parents[1]
PACKAGED_SCHEMAS_DIR = PACKAGE_ROOT / "schemas"
PACKAGED_MATRIX_FILE = PACKAGE_ROOT / "compatibility" / "matrix.json"
PACKAGED_GUIDE_FILE = PACKAGE_ROOT / "assets" / "AGENTS.md"

TEMPLATE_SELECTIONS = ("declared", "highest")


def _split_paths(raw: str) -> List[Path]:
    return [Path(p.strip()) for p in raw.split(os.pathsep) if p.strip()]


@dataclass
class Settings:
    # IMPORTANT: keep these names; the API and tests use them
    env: str = "dev"
    schema_roots: List[Path] = field(default_factory=list)   # searched before packaged schemas
    include_packaged_schemas: bool = True
    matrix_path: Optional[Path] = None                       # None => default search
    template_selection: str = "declared"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Reads:
          OIML_ENV                 dev | test | prod
          OIML_SCHEMA_PATH         extra schema roots (os.pathsep separated)
          OIML_COMPAT_MATRIX       compatibility matrix file
          OIML_TEMPLATE_SELECTION  declared | highest
        """
        env = (os.getenv("OIML_ENV") or "dev").strip().lower()

        roots = _split_paths(os.getenv("OIML_SCHEMA_PATH", ""))
        roots.append(Path.cwd() / "schemas")

        matrix_raw = os.getenv("OIML_COMPAT_MATRIX", "").strip()
        matrix_path = Path(matrix_raw) if matrix_raw else None

        selection = (os.getenv("OIML_TEMPLATE_SELECTION") or "declared").strip().lower()
        if selection not in TEMPLATE_SELECTIONS:
            selection = "declared"

        return cls(
            env=env,
            schema_roots=roots,
            matrix_path=matrix_path,
            template_selection=selection,
        )

    def all_schema_roots(self) -> List[Path]:
        roots = list(self.schema_roots)
        if self.include_packaged_schemas:
            roots.append(PACKAGED_SCHEMAS_DIR)
        return roots
