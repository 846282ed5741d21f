"""
Key/value persistence for small pieces of app state (e.g. seen tips).

Two backends:
- InMemoryStore: thread-safe dict, used in development and tests
- SupabaseStore: JSON values in a Supabase table with columns (key, value)

init_storage() picks Supabase when SUPABASE_URL and SUPABASE_ANON_KEY are
configured and falls back to memory otherwise.
"""

from __future__ import annotations
import copy
import threading
from typing import Any, Dict, Optional, Protocol

from supabase import Client, create_client


class StorageError(Exception):
    """Raised when a backend cannot read or write a value."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)


class SupabaseStore:
    """
    Store backed by a Supabase table.

    Expected schema:
        create table app_state (key text primary key, value jsonb not null);
    """

    def __init__(self, client: Client, table: str = "app_state"):
        self._client = client
        self._table = table

    def get(self, key: str) -> Optional[Any]:
        try:
            # maybe_single() returns None instead of raising when no row exists
            response = (
                self._client.table(self._table)
                .select("value")
                .eq("key", key)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

        if response is None or not response.data:
            return None
        return response.data.get("value")

    def set(self, key: str, value: Any) -> None:
        try:
            self._client.table(self._table).upsert({"key": key, "value": value}).execute()
        except Exception as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e


def init_storage(app) -> KeyValueStore:
    """
    Create the app's key/value store from config.

    Call this from the Flask app factory. The store is also kept on
    app.extensions["plant_agenda.store"].
    """
    url = app.config.get("SUPABASE_URL", "")
    anon_key = app.config.get("SUPABASE_ANON_KEY", "")
    table = app.config.get("STATE_TABLE", "app_state")

    store: KeyValueStore
    if url and anon_key:
        try:
            store = SupabaseStore(create_client(url, anon_key), table)
            app.logger.info(f"Supabase state store initialized (table={table})")
        except Exception as e:
            app.logger.warning(f"Failed to initialize Supabase client, using memory store: {e}")
            store = InMemoryStore()
    else:
        app.logger.warning("Supabase URL or ANON_KEY not configured. State is kept in memory only.")
        store = InMemoryStore()

    app.extensions["plant_agenda.store"] = store
    return store
