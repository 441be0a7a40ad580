"""Pydantic models for the flickr.photos.search response envelope."""

from pydantic import BaseModel, ConfigDict, ValidationError

from flickr_search.errors import JsonError


class PhotoEntry(BaseModel):
    """A single entry of ``photos.photo``.

    Missing fields fall back to their defaults; present fields must already
    carry the right JSON type.
    """

    model_config = ConfigDict(strict=True, extra="ignore")

    id: str = ""
    title: str = ""
    farm: int = 0
    server: str = ""
    secret: str = ""


class PhotoPage(BaseModel):
    """The ``photos`` block of a successful search."""

    model_config = ConfigDict(extra="ignore")

    photo: list[PhotoEntry]
    page: int | None = None
    pages: int | None = None
    perpage: int | None = None
    total: int | None = None


class SearchEnvelope(BaseModel):
    """Top-level search response."""

    model_config = ConfigDict(extra="ignore")

    stat: str
    photos: PhotoPage | None = None
    code: int | None = None
    message: str | None = None


def parse_search_response(raw: bytes | str) -> SearchEnvelope:
    """Parse and validate a raw search response body.

    Raises:
        JsonError: If the body is not JSON or does not match the envelope.
    """
    try:
        return SearchEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        if any(err["type"] == "json_invalid" for err in exc.errors()):
            raise JsonError("json parse error") from exc
        locations = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "<root>" for err in exc.errors()
        )
        raise JsonError(f"unexpected response structure at {locations}") from exc
