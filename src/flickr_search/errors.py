"""Error kinds surfaced by the Flickr client."""


class FlickrError(Exception):
    """Base class for every failure reported by a search or image load."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiError(FlickrError):
    """Transport failure, or a request Flickr itself reported as failed."""


class JsonError(FlickrError):
    """Response body could not be parsed into the expected structure."""


class UnknownError(FlickrError):
    """Response matched neither a recognised success nor a failure shape."""

    def __init__(self, message: str = "unknown response") -> None:
        super().__init__(message)


def describe_error(error: BaseException) -> str:
    """Return a short, user-facing line for an error."""
    if isinstance(error, ApiError):
        return f"Flickr request failed: {error.message}"
    if isinstance(error, JsonError):
        return f"Could not read Flickr response: {error.message}"
    if isinstance(error, UnknownError):
        return "Unexpected response from Flickr"
    return str(error)
