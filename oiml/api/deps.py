from __future__ import annotations

import threading
from typing import Optional

from oiml.core.config import Settings
from oiml.core.engine import Engine

_SHARED_ENGINE: Optional[Engine] = None
_SHARED_ENGINE_LOCK = threading.Lock()


def get_engine() -> Engine:
    global _SHARED_ENGINE
    with _SHARED_ENGINE_LOCK:
        if _SHARED_ENGINE is None:
            _SHARED_ENGINE = Engine.from_settings(Settings.from_env())
        return _SHARED_ENGINE


def reset_engine() -> None:
    """Test helper: the next request builds a fresh engine from the environment."""
    global _SHARED_ENGINE
    with _SHARED_ENGINE_LOCK:
        _SHARED_ENGINE = None
