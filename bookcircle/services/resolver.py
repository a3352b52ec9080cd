"""Resolve free-text queries and catalog selections to local book records."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from bookcircle.config import CATALOG_SEARCH_LIMIT, LOCAL_SEARCH_LIMIT, SEARCH_DEBOUNCE_SECONDS
from bookcircle.errors import CatalogUnavailable
from bookcircle.models import Book
from bookcircle.services.book_store import (
    find_by_external_id,
    find_by_title_author_substring,
    insert_book,
)
from bookcircle.services.google_books import CatalogBook, search_catalog

logger = logging.getLogger(__name__)


def catalog_to_book_fields(candidate: CatalogBook) -> dict:
    """Map a catalog record onto the books table columns."""
    return {
        "title": candidate.title,
        "author": candidate.author,
        "genre": candidate.genre,
        "publication_date": candidate.publication_date,
        "description": candidate.description,
        "cover_image_url": candidate.cover_image_url,
        "google_books_id": candidate.google_books_id or None,
        "isbn10": candidate.isbn10,
        "isbn13": candidate.isbn13,
        "page_count": candidate.page_count,
        "publisher": candidate.publisher,
        "google_rating": candidate.average_rating,
        "google_ratings_count": candidate.ratings_count,
    }


def merge_results(local: list[Book], catalog: list[CatalogBook]) -> list[Book | CatalogBook]:
    """Local books first, then catalog books not already stored locally.

    Duplicates are detected by catalog id only, never by title similarity.
    """
    known_ids = {b.google_books_id for b in local if b.google_books_id}
    return [*local, *(c for c in catalog if c.google_books_id not in known_ids)]


async def search_books(
    session: AsyncSession,
    query: str,
    local_limit: int = LOCAL_SEARCH_LIMIT,
    catalog_limit: int = CATALOG_SEARCH_LIMIT,
) -> list[Book | CatalogBook]:
    """Search the local library and Google Books concurrently and merge.

    An unavailable catalog degrades the result to local matches only.
    """
    if not query or not query.strip():
        return []

    local, catalog = await asyncio.gather(
        find_by_title_author_substring(session, query, local_limit),
        search_catalog(query, catalog_limit),
        return_exceptions=True,
    )
    if isinstance(local, BaseException):
        raise local
    if isinstance(catalog, CatalogUnavailable):
        logger.warning("Catalog unavailable, returning local results only for '%s'", query)
        catalog = []
    elif isinstance(catalog, BaseException):
        raise catalog

    return merge_results(local, catalog)


async def find_or_create(session: AsyncSession, candidate: CatalogBook) -> Book:
    """Return the local book for a catalog record, inserting it on first use.

    An existing row is returned as stored, without refreshing its fields.
    The lookup and insert are separate statements: two concurrent callers
    can both miss the lookup, in which case the unique index rejects the
    second insert with PersistenceError.
    """
    if candidate.google_books_id:
        existing = await find_by_external_id(session, candidate.google_books_id)
        if existing is not None:
            return existing
    return await insert_book(session, catalog_to_book_fields(candidate))


class SearchSession:
    """Debounced search owned by one consumer, such as a single search box.

    Every submit() cancels the pending timer and schedules a new search
    after ``delay`` seconds. Searches already in flight are not aborted,
    but their results are dropped once a newer query has been submitted.
    """

    def __init__(
        self,
        search: Callable[[str], Awaitable[list]],
        delay: float = SEARCH_DEBOUNCE_SECONDS,
        on_results: Callable[[str, list], None] | None = None,
    ) -> None:
        self._search = search
        self.delay = delay
        self._on_results = on_results
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._generation = 0
        self._settled = asyncio.Event()
        self.latest: list = []
        self.latest_query: str | None = None
        self.error: Exception | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def submit(self, query: str) -> None:
        self.cancel()
        self._generation += 1
        self._settled.clear()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._fire, query, self._generation)

    def cancel(self) -> None:
        """Drop the pending (not yet started) search, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, query: str, generation: int) -> None:
        self._timer = None
        task = asyncio.ensure_future(self._run(query, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, query: str, generation: int) -> None:
        error = None
        results: list = []
        if query.strip():
            try:
                results = await self._search(query)
            except Exception as e:
                logger.warning("Search for '%s' failed: %s", query, e)
                error = e

        if generation != self._generation:
            logger.debug("Dropping results for superseded query '%s'", query)
            return

        self.latest = results
        self.latest_query = query
        self.error = error
        self._settled.set()
        if error is None and self._on_results is not None:
            self._on_results(query, results)

    async def wait(self) -> list:
        """Wait for the newest submitted query to settle and return its results."""
        await self._settled.wait()
        if self.error is not None:
            raise self.error
        return self.latest

    async def aclose(self) -> None:
        self.cancel()
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
