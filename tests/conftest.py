"""Shared test fixtures."""

from collections.abc import Callable
from io import BytesIO

import duckdb
import httpx
import pytest
from PIL import Image

from flickr_search.favourites.schema import ensure_schema
from flickr_search.flickr.client import FlickrClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def db_conn():
    """In-memory DuckDB connection with schema initialized."""
    conn = duckdb.connect(":memory:")
    ensure_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A tiny valid JPEG."""
    return make_jpeg()


def make_jpeg(size: tuple[int, int] = (4, 3)) -> bytes:
    """Encode a solid-colour JPEG of the given size."""
    buf = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, format="JPEG")
    return buf.getvalue()


def make_client(handler: Handler, api_key: str = "test-key") -> FlickrClient:
    """FlickrClient whose HTTP traffic is answered by ``handler``."""
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return FlickrClient(api_key=api_key, http_client=http_client)


def photo_entry(
    photo_id: str, title: str = "", farm: int = 1, server: str = "1", secret: str = "s"
) -> dict:
    """One ``photos.photo`` entry as Flickr returns it."""
    return {
        "id": photo_id,
        "owner": "12345@N00",
        "secret": secret,
        "server": server,
        "farm": farm,
        "title": title,
        "ispublic": 1,
        "isfriend": 0,
        "isfamily": 0,
    }


def ok_response(*entries: dict) -> dict:
    """A successful search envelope wrapping ``entries``."""
    return {
        "photos": {
            "page": 1,
            "pages": 1,
            "perpage": 30,
            "total": len(entries),
            "photo": list(entries),
        },
        "stat": "ok",
    }
