"""Shared DuckDB connection factory."""

import duckdb

from flickr_search.config import FAVOURITES_DB_PATH


def get_connection(db_path: str | None = None) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection. Defaults to the project-root favourites DB file."""
    path = db_path or str(FAVOURITES_DB_PATH)
    conn = duckdb.connect(path)

    from flickr_search.favourites.schema import ensure_schema

    ensure_schema(conn)
    return conn
