"""Non-blocking search and image loading with callbacks on the main context.

Network work runs on background executors. Completions are handed to a
:class:`Dispatcher`, which decides on which thread the caller's callback
runs. Searches are tagged with a generation number; a completion is only
delivered when its generation is still the latest issued, so a superseded
search never reaches the caller.
"""

import logging
import queue
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol, TypeVar

from PIL import Image

from flickr_search.errors import FlickrError, UnknownError
from flickr_search.flickr.client import FlickrClient
from flickr_search.models import ImageSize, PhotoRecord, SearchResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

SearchCompletion = Callable[[SearchResult | None, FlickrError | None], None]
ImageCompletion = Callable[[Image.Image | None, FlickrError | None], None]


class Dispatcher(Protocol):
    """Schedules a callback on the caller's execution context."""

    def post(self, callback: Callable[[], None]) -> None:
        """Schedule ``callback`` to run."""


class ImmediateDispatcher:
    """Runs callbacks straight away on whichever thread posts them."""

    def post(self, callback: Callable[[], None]) -> None:
        callback()


class MainThreadDispatcher:
    """Queues callbacks until the owning thread drains them.

    The main/UI loop calls :meth:`run_pending` once per iteration, or
    :meth:`run_until` to block until some condition holds.
    """

    def __init__(self) -> None:
        self._pending: queue.SimpleQueue[Callable[[], None]] = queue.SimpleQueue()

    def post(self, callback: Callable[[], None]) -> None:
        self._pending.put(callback)

    def run_pending(self) -> int:
        """Run every callback queued so far without blocking. Returns the count run."""
        count = 0
        while True:
            try:
                callback = self._pending.get_nowait()
            except queue.Empty:
                return count
            callback()
            count += 1

    def run_until(self, predicate: Callable[[], bool], timeout: float | None = None) -> bool:
        """Run callbacks as they arrive until ``predicate()`` is true.

        Returns the final value of ``predicate()``; ``False`` means the
        timeout expired first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            try:
                callback = self._pending.get(timeout=remaining)
            except queue.Empty:
                return predicate()
            callback()
        return True


class FlickrSearcher:
    """Callback-based front end over :class:`FlickrClient`."""

    def __init__(
        self,
        client: FlickrClient,
        dispatcher: Dispatcher | None = None,
        image_workers: int = 4,
    ) -> None:
        self._client = client
        self._dispatcher = dispatcher or ImmediateDispatcher()
        # One worker: searches run strictly one after another.
        self._search_executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="flickr-search"
        )
        self._image_executor = ThreadPoolExecutor(
            max_workers=image_workers, thread_name_prefix="flickr-image"
        )
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def latest_generation(self) -> int:
        with self._lock:
            return self._generation

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def search(self, term: str, completion: SearchCompletion) -> int:
        """Start a search for ``term`` and return its generation number.

        ``completion(result, error)`` is posted to the dispatcher, unless a
        later :meth:`search` or :meth:`cancel` has superseded this one.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation
        logger.debug("Queueing search %d for %r", generation, term)
        future = self._search_executor.submit(self._run_search, generation, term, completion)
        future.add_done_callback(_log_failure)
        return generation

    def cancel(self) -> None:
        """Discard whatever search is currently in flight."""
        with self._lock:
            cancelled = self._generation
            self._generation += 1
        logger.debug("Cancelled searches up to generation %d", cancelled)

    def _run_search(self, generation: int, term: str, completion: SearchCompletion) -> None:
        if not self._is_current(generation):
            logger.debug("Skipping superseded search %d for %r", generation, term)
            return
        result, error = _call(self._client.search, term)

        def deliver() -> None:
            if not self._is_current(generation):
                logger.debug("Dropping stale result of search %d for %r", generation, term)
                return
            completion(result, error)

        self._dispatcher.post(deliver)

    def load_image(
        self,
        photo: PhotoRecord,
        size: ImageSize | str,
        completion: ImageCompletion,
    ) -> Future:
        """Fetch one size of ``photo`` in the background.

        ``completion(image, error)`` is always posted; image loads are not
        tied to search generations.
        """

        def work() -> None:
            image, error = _call(self._client.fetch_image, photo, size)
            self._dispatcher.post(lambda: completion(image, error))

        future = self._image_executor.submit(work)
        future.add_done_callback(_log_failure)
        return future

    def load_thumbnail(self, photo: PhotoRecord, completion: ImageCompletion) -> Future:
        return self.load_image(photo, ImageSize.THUMBNAIL, completion)

    def load_large_image(self, photo: PhotoRecord, completion: ImageCompletion) -> Future:
        return self.load_image(photo, ImageSize.LARGE, completion)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background executors."""
        self._search_executor.shutdown(wait=wait)
        self._image_executor.shutdown(wait=wait)

    def __enter__(self) -> "FlickrSearcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def _call(func: Callable[..., T], *args: object) -> tuple[T | None, FlickrError | None]:
    """Run ``func`` and turn any failure into an error value."""
    try:
        return func(*args), None
    except FlickrError as exc:
        return None, exc
    except Exception as exc:
        logger.exception("Unexpected failure in %s", getattr(func, "__name__", func))
        return None, UnknownError(str(exc))


def _log_failure(future: Future) -> None:
    """Report exceptions raised by completions run on a worker thread."""
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Completion callback failed", exc_info=exc)
