"""Persistence collaborators for Complizen."""

from complizen.persistence.kv_store import InMemoryStore, KeyValueStore
from complizen.persistence.ledger_store import LedgerStore
from complizen.persistence.schedule_store import ScheduleStore
from complizen.persistence.supabase_store import SupabaseStore

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "SupabaseStore",
    "LedgerStore",
    "ScheduleStore",
]
