"""Flickr REST API client."""

import logging
from io import BytesIO

import httpx
from PIL import Image

from flickr_search.config import (
    FLICKR_API_BASE,
    FLICKR_API_KEY,
    FLICKR_PER_PAGE,
    FLICKR_SEARCH_METHOD,
    HTTP_TIMEOUT,
)
from flickr_search.errors import ApiError, JsonError, UnknownError
from flickr_search.flickr.schema import PhotoEntry, parse_search_response
from flickr_search.models import ImageSize, PhotoRecord, SearchResult

logger = logging.getLogger(__name__)


class FlickrClient:
    """Blocking client for photo search and static image downloads.

    Every failure is raised as a :class:`~flickr_search.errors.FlickrError`
    subclass; see :class:`~flickr_search.flickr.searcher.FlickrSearcher` for
    the callback-based wrapper.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = HTTP_TIMEOUT,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.api_key = api_key or FLICKR_API_KEY
        if not self.api_key:
            raise ValueError("Flickr API key is required. Set FLICKR_API_KEY in .env file.")
        self.timeout = timeout
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._http.close()

    def __enter__(self) -> "FlickrClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def build_search_params(self, term: str) -> dict[str, str]:
        """Query parameters for a flickr.photos.search call."""
        return {
            "method": FLICKR_SEARCH_METHOD,
            "api_key": self.api_key,
            "text": term,
            "per_page": str(FLICKR_PER_PAGE),
            "format": "json",
            "nojsoncallback": "1",
        }

    def search_url(self, term: str) -> str:
        """Full request URL for ``term``, with the term query-encoded."""
        return str(httpx.URL(FLICKR_API_BASE, params=self.build_search_params(term)))

    def search(self, term: str) -> SearchResult:
        """Search photos matching ``term``.

        Raises:
            ApiError: On transport failure or when Flickr reports ``stat == "fail"``.
            JsonError: When the body is not a valid search envelope.
            UnknownError: When ``stat`` is neither ``"ok"`` nor ``"fail"``.
        """
        logger.info("Searching Flickr for %r", term)
        try:
            resp = self._http.get(FLICKR_API_BASE, params=self.build_search_params(term))
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Search request for %r failed: %s", term, exc)
            raise ApiError(str(exc)) from exc

        envelope = parse_search_response(resp.content)
        logger.debug("Search for %r returned stat=%s", term, envelope.stat)

        if envelope.stat == "fail":
            message = "request failed"
            if envelope.message:
                message = f"{message}: {envelope.message}"
            if envelope.code is not None:
                message = f"{message} (code {envelope.code})"
            raise ApiError(message)
        if envelope.stat != "ok":
            raise UnknownError(f"unknown api response stat {envelope.stat!r}")
        if envelope.photos is None:
            raise JsonError("missing photos block")

        photos = tuple(_to_record(entry) for entry in envelope.photos.photo)
        logger.info("Search for %r produced %d photos", term, len(photos))
        return SearchResult(term=term, photos=photos)

    def fetch_image(
        self, photo: PhotoRecord, size: ImageSize | str = ImageSize.THUMBNAIL
    ) -> Image.Image:
        """Download and decode one size variant of ``photo``.

        No caching: each call issues a fresh request.
        """
        url = photo.image_url(size)
        try:
            resp = self._http.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Image request %s failed: %s", url, exc)
            raise ApiError(str(exc)) from exc

        content = resp.content
        if not content:
            raise UnknownError("empty image body")
        try:
            image = Image.open(BytesIO(content))
            image.load()
        except (OSError, Image.DecompressionBombError) as exc:
            logger.warning("Could not decode image from %s: %s", url, exc)
            raise UnknownError("undecodable image body") from exc
        return image


def _to_record(entry: PhotoEntry) -> PhotoRecord:
    return PhotoRecord(
        photo_id=entry.id,
        title=entry.title,
        farm=entry.farm,
        server=entry.server,
        secret=entry.secret,
    )
