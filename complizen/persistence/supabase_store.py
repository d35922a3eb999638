"""Supabase-backed key-value store."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from supabase import Client


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class SupabaseStore:
    """Key-value store on a Supabase table with `key`, `value` and `updated_at`."""

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> Any | None:
        """Get the value stored under `key`."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        return response.data[0]["value"] if response.data else None

    def set(self, key: str, value: Any) -> None:
        """Insert or replace the value under `key`."""
        self.client.table(self.table).upsert(
            {"key": key, "value": value, "updated_at": _utc_now_iso()},
            on_conflict="key",
        ).execute()

    def keys(self, prefix: str = "") -> list[str]:
        """List keys starting with `prefix`."""
        response = (
            self.client.table(self.table)
            .select("key")
            .like("key", f"{prefix}%")
            .order("key", desc=False)
            .execute()
        )
        return [row["key"] for row in (response.data or [])]
