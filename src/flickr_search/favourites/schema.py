"""DuckDB schema definition for the favourites store."""

import duckdb


def ensure_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Create tables if they do not exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS favourites (
            photo_id     VARCHAR PRIMARY KEY,
            is_favourite BOOLEAN NOT NULL DEFAULT false,
            updated_at   TIMESTAMP DEFAULT current_timestamp
        )
    """)
