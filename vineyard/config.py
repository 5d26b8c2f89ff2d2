"""Runtime configuration read from the environment.

Template pack location is resolved at load time by the template loader
(VINEYARD_TEMPLATE_DIR), so tests can point it elsewhere per case.
"""
from __future__ import annotations

import os


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


# Generation defaults
DEFAULT_CHAIN_LENGTH = _env_int("VINEYARD_CHAIN_LENGTH", 4)
GENERATION_MAX_ATTEMPTS = _env_int("VINEYARD_MAX_ATTEMPTS", 10)

# CLI logging
LOG_LEVEL = os.environ.get("VINEYARD_LOG_LEVEL", "INFO").strip().upper() or "INFO"
