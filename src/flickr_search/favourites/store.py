"""Favourite flag stores keyed by Flickr photo ID."""

import threading
from typing import Protocol

import duckdb


class FavouriteStore(Protocol):
    """Key-value mapping from photo ID to a favourite flag."""

    def get(self, key: str) -> bool:
        """Return the flag for ``key``; unknown keys are not favourites."""

    def set(self, key: str, value: bool) -> None:
        """Store the flag for ``key``. Last write wins."""


class InMemoryFavouriteStore:
    """Process-local store, mainly for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._flags: dict[str, bool] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bool:
        with self._lock:
            return self._flags.get(key, False)

    def set(self, key: str, value: bool) -> None:
        with self._lock:
            self._flags[key] = bool(value)


class DuckDBFavouriteStore:
    """Store backed by the ``favourites`` table of a DuckDB database."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn
        # A DuckDB connection must not be shared across threads unguarded.
        self._lock = threading.Lock()

    def get(self, key: str) -> bool:
        with self._lock:
            row = self._conn.execute(
                "SELECT is_favourite FROM favourites WHERE photo_id = ?", [key]
            ).fetchone()
        return bool(row[0]) if row is not None else False

    def set(self, key: str, value: bool) -> None:
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO favourites (photo_id, is_favourite, updated_at)
                VALUES (?, ?, current_timestamp)
                ON CONFLICT (photo_id) DO UPDATE SET
                    is_favourite = excluded.is_favourite,
                    updated_at = excluded.updated_at
                """,
                [key, bool(value)],
            )

    def list_favourites(self) -> list[str]:
        """Return IDs of every photo currently flagged, oldest flag first."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT photo_id FROM favourites WHERE is_favourite ORDER BY updated_at, photo_id"
            ).fetchall()
        return [row[0] for row in rows]
