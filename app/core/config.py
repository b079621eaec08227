# app/core/config.py
"""
Tunables read from the environment. `app.main` loads .env files before this
module is imported, so values from .env are visible here.
"""
from __future__ import annotations

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


# Stats card: verified credentials lapsing within this many days
EXPIRING_SOON_DAYS = _int_env("EXPIRING_SOON_DAYS", 30)

# Dashboard action queue length
ACTION_QUEUE_LIMIT = _int_env("ACTION_QUEUE_LIMIT", 5)

# Upcoming renewals list window
RENEWAL_WINDOW_DAYS = _int_env("RENEWAL_WINDOW_DAYS", 60)

# Accounts table
ACCOUNTS_PAGE_SIZE = _int_env("ACCOUNTS_PAGE_SIZE", 10)
MAX_PAGE_SIZE = 100


def app_timezone() -> str:
    return os.getenv("APP_TIMEZONE", "UTC")


def doc_storage_dir() -> str:
    return os.getenv("DOC_STORAGE_DIR", os.path.join(os.getcwd(), "documents"))
