"""Data models for Flickr search results."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from flickr_search.config import FLICKR_STATIC_URL_TEMPLATE

if TYPE_CHECKING:
    from flickr_search.favourites.store import FavouriteStore


class ImageSize(str, Enum):
    """Flickr static URL size suffixes used by the app."""

    THUMBNAIL = "m"  # 240px on the longest side
    LARGE = "b"  # 1024px on the longest side


_PHOTO_URL_RE = re.compile(
    r"^http://farm(?P<farm>\d+)\.staticflickr\.com/"
    r"(?P<server>[^/]*)/(?P<photo_id>[^_/]*)_(?P<secret>[^_/]*)_(?P<size>[a-z0-9])\.jpg$"
)


@dataclass(frozen=True)
class PhotoRecord:
    """One photo from a search response.

    Two records are equal when they share a ``photo_id``; the remaining
    fields only feed URL construction and display.
    """

    photo_id: str
    title: str = field(default="", compare=False)
    farm: int = field(default=0, compare=False)
    server: str = field(default="", compare=False)
    secret: str = field(default="", compare=False)

    def image_url(self, size: ImageSize | str = ImageSize.THUMBNAIL) -> str:
        """Build the static Flickr photo URL for the given size."""
        code = size.value if isinstance(size, ImageSize) else size
        return FLICKR_STATIC_URL_TEMPLATE.format(
            farm=self.farm,
            server=self.server,
            photo_id=self.photo_id,
            secret=self.secret,
            size=code,
        )

    @property
    def thumbnail_url(self) -> str:
        return self.image_url(ImageSize.THUMBNAIL)

    @property
    def large_url(self) -> str:
        return self.image_url(ImageSize.LARGE)

    def is_favourite(self, store: "FavouriteStore") -> bool:
        """Read the favourite flag for this photo from ``store``."""
        return store.get(self.photo_id)

    def set_favourite(self, store: "FavouriteStore", value: bool) -> None:
        """Write the favourite flag for this photo to ``store``."""
        store.set(self.photo_id, value)


@dataclass(frozen=True)
class SearchResult:
    """A completed search: the term and its photos in API order."""

    term: str
    photos: tuple[PhotoRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.photos)

    def __iter__(self) -> Iterator[PhotoRecord]:
        return iter(self.photos)


class PhotoUrlParts(NamedTuple):
    """Components recovered from a static Flickr photo URL."""

    farm: int
    server: str
    photo_id: str
    secret: str
    size: str


def parse_photo_url(url: str) -> PhotoUrlParts:
    """Split a static Flickr photo URL back into its components.

    Raises:
        ValueError: If ``url`` does not follow the static URL template.
    """
    match = _PHOTO_URL_RE.match(url)
    if match is None:
        raise ValueError(f"Not a Flickr static photo URL: {url}")
    return PhotoUrlParts(
        farm=int(match["farm"]),
        server=match["server"],
        photo_id=match["photo_id"],
        secret=match["secret"],
        size=match["size"],
    )
