"""Tests for the Flickr REST client."""

import httpx
import pytest
from conftest import make_client, make_jpeg, ok_response, photo_entry
from PIL import Image

from flickr_search.errors import ApiError, JsonError, UnknownError
from flickr_search.models import ImageSize, PhotoRecord


def _json_handler(payload: dict):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    return handler


def test_search_single_photo():
    payload = {
        "stat": "ok",
        "photos": {
            "photo": [
                {"id": "123", "title": "cat", "farm": 5, "server": "9", "secret": "abc"}
            ]
        },
    }
    client = make_client(_json_handler(payload))

    result = client.search("cat")

    assert result.term == "cat"
    assert len(result) == 1
    photo = result.photos[0]
    assert photo.photo_id == "123"
    assert photo.title == "cat"
    assert photo.thumbnail_url == "http://farm5.staticflickr.com/9/123_abc_m.jpg"


def test_search_preserves_count_and_order():
    ids = [str(n) for n in (907, 12, 555, 3, 41)]
    client = make_client(_json_handler(ok_response(*(photo_entry(i) for i in ids))))

    result = client.search("anything")

    assert [p.photo_id for p in result] == ids


def test_search_empty_photo_list():
    client = make_client(_json_handler(ok_response()))
    result = client.search("zzzz")
    assert len(result) == 0


def test_search_missing_fields_use_defaults():
    payload = {"stat": "ok", "photos": {"photo": [{"id": "7"}, {}]}}
    client = make_client(_json_handler(payload))

    first, second = client.search("sparse").photos

    assert (first.photo_id, first.title, first.farm, first.server, first.secret) == (
        "7", "", 0, "", "",
    )
    assert second.photo_id == ""
    assert second.farm == 0


def test_search_request_parameters():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=ok_response())

    client = make_client(handler, api_key="k-123")
    client.search("red panda")

    params = seen[0].url.params
    assert seen[0].method == "GET"
    assert seen[0].url.host == "api.flickr.com"
    assert seen[0].url.path == "/services/rest/"
    assert params["method"] == "flickr.photos.search"
    assert params["api_key"] == "k-123"
    assert params["text"] == "red panda"
    assert params["per_page"] == "30"
    assert params["format"] == "json"
    assert params["nojsoncallback"] == "1"


def test_search_url_encodes_term():
    client = make_client(_json_handler(ok_response()))
    url = client.search_url("cats & dogs?#")

    assert "cats & dogs" not in url
    assert "#" not in url
    assert httpx.URL(url).params["text"] == "cats & dogs?#"


def test_search_stat_fail_raises_api_error():
    client = make_client(_json_handler({"stat": "fail"}))
    with pytest.raises(ApiError):
        client.search("cat")


def test_search_stat_fail_includes_flickr_message():
    payload = {"stat": "fail", "code": 100, "message": "Invalid API Key (Key has invalid format)"}
    client = make_client(_json_handler(payload))
    with pytest.raises(ApiError, match="Invalid API Key"):
        client.search("cat")


def test_search_unknown_stat_raises_unknown_error():
    client = make_client(_json_handler({"stat": "maybe"}))
    with pytest.raises(UnknownError):
        client.search("cat")


def test_search_ok_without_photos_raises_json_error():
    client = make_client(_json_handler({"stat": "ok"}))
    with pytest.raises(JsonError):
        client.search("cat")


def test_search_malformed_body_raises_json_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"jsonFlickrApi({")

    client = make_client(handler)
    with pytest.raises(JsonError):
        client.search("cat")


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"photos": {"photo": []}},
        {"stat": "ok", "photos": {"photo": "nope"}},
        {"stat": "ok", "photos": {"photo": [{"id": 123}]}},
        {"stat": "ok", "photos": {"photo": [{"id": "1", "farm": "five"}]}},
    ],
)
def test_search_structural_mismatch_raises_json_error(payload):
    client = make_client(_json_handler(payload))
    with pytest.raises(JsonError):
        client.search("cat")


def test_search_transport_failure_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(ApiError, match="Connection refused"):
        client.search("cat")


def test_search_http_error_status_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="down")

    client = make_client(handler)
    with pytest.raises(ApiError, match="503"):
        client.search("cat")


def test_client_requires_api_key(monkeypatch):
    monkeypatch.setattr("flickr_search.flickr.client.FLICKR_API_KEY", "")
    with pytest.raises(ValueError):
        make_client(_json_handler({}), api_key="")


def test_fetch_image_uses_size_url():
    seen: list[str] = []
    jpeg = make_jpeg((8, 6))

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, content=jpeg)

    client = make_client(handler)
    photo = PhotoRecord(photo_id="123", title="cat", farm=5, server="9", secret="abc")

    image = client.fetch_image(photo, ImageSize.LARGE)

    assert isinstance(image, Image.Image)
    assert image.size == (8, 6)
    assert seen == ["http://farm5.staticflickr.com/9/123_abc_b.jpg"]


def test_fetch_image_refetches_every_call(jpeg_bytes):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        return httpx.Response(200, content=jpeg_bytes)

    client = make_client(handler)
    photo = PhotoRecord(photo_id="1", farm=1, server="1", secret="s")
    client.fetch_image(photo)
    client.fetch_image(photo)
    assert len(calls) == 2


def test_fetch_image_empty_body_raises_unknown_error():
    client = make_client(lambda request: httpx.Response(200, content=b""))
    with pytest.raises(UnknownError):
        client.fetch_image(PhotoRecord(photo_id="1"))


def test_fetch_image_undecodable_body_raises_unknown_error():
    client = make_client(lambda request: httpx.Response(200, content=b"<html>not an image</html>"))
    with pytest.raises(UnknownError):
        client.fetch_image(PhotoRecord(photo_id="1"))


def test_fetch_image_transport_failure_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = make_client(handler)
    with pytest.raises(ApiError, match="timed out"):
        client.fetch_image(PhotoRecord(photo_id="1"))


def test_search_stat_fail_with_message_but_no_code():
    client = make_client(_json_handler({"stat": "fail", "message": "Service unavailable"}))
    with pytest.raises(ApiError) as exc_info:
        client.search("cat")
    assert exc_info.value.message == "request failed: Service unavailable"


def test_search_stat_fail_with_code_only():
    client = make_client(_json_handler({"stat": "fail", "code": 105}))
    with pytest.raises(ApiError) as exc_info:
        client.search("cat")
    assert exc_info.value.message == "request failed (code 105)"


def test_fetch_image_decompression_bomb_raises_unknown_error(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1)
    client = make_client(lambda request: httpx.Response(200, content=make_jpeg((8, 6))))
    with pytest.raises(UnknownError):
        client.fetch_image(PhotoRecord(photo_id="1"))
