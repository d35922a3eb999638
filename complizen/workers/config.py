"""Configuration for worker processes."""

import os

from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_KEY = SUPABASE_SERVICE_ROLE_KEY or SUPABASE_ANON_KEY
KV_TABLE = os.getenv("KV_TABLE", "kv_store")

# Notifications
NOTIFICATION_URL = os.getenv("NOTIFICATION_URL", "")
NOTIFICATION_API_KEY = os.getenv("NOTIFICATION_API_KEY", "")
NOTIFICATION_TIMEOUT = _get_float("NOTIFICATION_TIMEOUT", 10.0)

# Polling interval (seconds)
SCHEDULER_POLL_INTERVAL = _get_int("SCHEDULER_POLL_INTERVAL", 60)

# Worker identity
WORKER_ID = os.getenv("WORKER_ID", "scheduler-1")
