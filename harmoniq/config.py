# ============================================================================
# Harmoniq Safety - Runtime Configuration
# ============================================================================
# Environment-driven settings. Read once at import; modules that need a value
# at call time (the DB path) look it up through this module so tests can
# redirect it.
# ============================================================================

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


DB_PATH = os.environ.get("HARMONIQ_DB_PATH") or str(BASE_DIR / "harmoniq.db")
SECRET_KEY = os.environ.get("HARMONIQ_SECRET_KEY", "harmoniq-dev-secret")
LOG_LEVEL = os.environ.get("HARMONIQ_LOG_LEVEL", "INFO").upper()

SEED_DEMO = _env_flag("HARMONIQ_SEED_DEMO", True)
SCHEDULER_ENABLED = _env_flag("HARMONIQ_SCHEDULER", True)
SCHEDULER_INTERVAL_MINUTES = _env_int("HARMONIQ_SCHEDULER_INTERVAL_MINUTES", 60)

# Asset alert look-ahead window
ALERT_WINDOW_DAYS = _env_int("HARMONIQ_ALERT_WINDOW_DAYS", 90)

APP_NAME = "Harmoniq Safety"
