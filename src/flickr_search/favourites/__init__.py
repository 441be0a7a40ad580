"""Per-photo favourite flags behind an injectable key-value interface."""

from flickr_search.favourites.store import (
    DuckDBFavouriteStore,
    FavouriteStore,
    InMemoryFavouriteStore,
)

__all__ = ["DuckDBFavouriteStore", "FavouriteStore", "InMemoryFavouriteStore"]
