"""
Agents guide lookup.

Search order:
    OIML_AGENTS_GUIDE -> <cwd>/assets/AGENTS.md -> packaged guide

The first existing file wins. A missing guide is reported, not fatal: the
engine runs without it.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from oiml.core.config import PACKAGED_GUIDE_FILE
from oiml.core.errors import GuideUnavailable

_log = logging.getLogger("oiml.guide")

GUIDE_FILE = "AGENTS.md"


@dataclass(frozen=True)
class Guide:
    path: Path
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "content": self.content, "path": str(self.path), "size": len(self.content)}


def guide_paths() -> List[Path]:
    paths: List[Path] = []
    env_path = os.getenv("OIML_AGENTS_GUIDE", "").strip()
    if env_path:
        paths.append(Path(env_path))
    paths.append(Path.cwd() / "assets" / GUIDE_FILE)
    paths.append(PACKAGED_GUIDE_FILE)

    unique: List[Path] = []
    for p in paths:
        if p not in unique:
            unique.append(p)
    return unique


def load_guide(paths: Optional[Sequence[Path]] = None) -> Guide:
    searched = list(paths) if paths is not None else guide_paths()
    for candidate in searched:
        if not candidate.is_file():
            continue
        try:
            content = candidate.read_text(encoding="utf-8")
        except OSError as exc:
            raise GuideUnavailable(f"Error reading {GUIDE_FILE}: {exc}", searched=[str(candidate)]) from exc
        _log.debug("Using agents guide %s", candidate)
        return Guide(path=candidate, content=content)

    raise GuideUnavailable(
        f"{GUIDE_FILE} file not found in any expected location",
        searched=[str(p) for p in searched],
    )
