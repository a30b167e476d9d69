# vebben/config.py
from __future__ import annotations
import os
from zoneinfo import ZoneInfo

# ---- Config ------------------------------------------------------------------
# Read once at import; readers look these up at call time, so an app (or a
# test) may override them during startup.
def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")

DEBUG = _env_bool("VEBBEN_DEBUG", False)

# Trim whitespace from form values before any processing.
TRIM_SPACE = _env_bool("VEBBEN_TRIM_SPACE", True)

# Time zone used for all form input.
TIME_ZONE = ZoneInfo(os.getenv("VEBBEN_TIME_ZONE", "CET"))
