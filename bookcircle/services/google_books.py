"""Google Books API client for searching the external catalog."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from bookcircle.config import (
    CATALOG_SEARCH_LIMIT,
    GOOGLE_BOOKS_API_KEY,
    GOOGLE_BOOKS_BASE_URL,
    GOOGLE_BOOKS_TIMEOUT,
    PLACEHOLDER_COVER_URL,
)
from bookcircle.errors import CatalogUnavailable, NotFound

logger = logging.getLogger(__name__)

MAX_RESULTS = 40  # Google Books rejects larger pages
UNKNOWN_TITLE = "Unknown Title"
UNKNOWN_AUTHOR = "Unknown Author"
UNKNOWN_GENRE = "Unknown"

_YEAR_ONLY = re.compile(r"^\d{4}$")
_YEAR_MONTH = re.compile(r"^\d{4}-\d{2}$")


@dataclass
class CatalogBook:
    """A Google Books volume mapped into the application's book fields."""

    google_books_id: str | None
    title: str = UNKNOWN_TITLE
    authors: list[str] = field(default_factory=lambda: [UNKNOWN_AUTHOR])
    author: str = UNKNOWN_AUTHOR
    genre: str = UNKNOWN_GENRE
    categories: list[str] = field(default_factory=list)
    description: str | None = None
    publication_date: str | None = None
    page_count: int | None = None
    publisher: str | None = None
    average_rating: float | None = None
    ratings_count: int | None = None
    language: str | None = None
    isbn10: str | None = None
    isbn13: str | None = None
    thumbnail: str | None = None
    small_thumbnail: str | None = None
    cover_image_url: str | None = None
    preview_link: str | None = None
    info_link: str | None = None


def format_published_date(value: str | None) -> str | None:
    """Pad Google's partial dates to day precision.

    "2017" -> "2017-01-01", "2017-03" -> "2017-03-01". Anything else is
    returned unchanged.
    """
    if not value:
        return None
    if _YEAR_ONLY.match(value):
        return f"{value}-01-01"
    if _YEAR_MONTH.match(value):
        return f"{value}-01"
    return value


def extract_isbn(identifiers: list[dict] | None, kind: str) -> str | None:
    """Return the first identifier of the given type (ISBN_10 or ISBN_13)."""
    if not identifiers:
        return None
    for entry in identifiers:
        if entry.get("type") == kind:
            return entry.get("identifier")
    return None


def normalize_volume(item: dict) -> CatalogBook:
    volume_info = item.get("volumeInfo") or {}
    image_links = volume_info.get("imageLinks") or {}
    identifiers = volume_info.get("industryIdentifiers")

    authors = volume_info.get("authors") or [UNKNOWN_AUTHOR]
    categories = volume_info.get("categories") or []
    thumbnail = image_links.get("thumbnail") or image_links.get("smallThumbnail")
    page_count = volume_info.get("pageCount")
    isbn10 = extract_isbn(identifiers, "ISBN_10")
    isbn13 = extract_isbn(identifiers, "ISBN_13")

    return CatalogBook(
        google_books_id=item.get("id"),
        title=volume_info.get("title") or UNKNOWN_TITLE,
        authors=list(authors),
        author=", ".join(authors),
        genre=categories[0] if categories else UNKNOWN_GENRE,
        categories=list(categories),
        description=volume_info.get("description"),
        publication_date=format_published_date(volume_info.get("publishedDate")),
        page_count=page_count if isinstance(page_count, int) and page_count > 0 else None,
        publisher=volume_info.get("publisher"),
        average_rating=volume_info.get("averageRating"),
        ratings_count=volume_info.get("ratingsCount"),
        language=volume_info.get("language"),
        isbn10=isbn10 if isbn10 and len(isbn10) == 10 else None,
        isbn13=isbn13 if isbn13 and len(isbn13) == 13 else None,
        thumbnail=thumbnail,
        small_thumbnail=image_links.get("smallThumbnail"),
        cover_image_url=thumbnail,
        preview_link=volume_info.get("previewLink"),
        info_link=volume_info.get("infoLink"),
    )


def _field(book: Any, *names: str) -> Any:
    for name in names:
        value = book.get(name) if isinstance(book, Mapping) else getattr(book, name, None)
        if value:
            return value
    return None


def placeholder_cover_url(title: str | None) -> str:
    text = quote((title or "")[:20], safe="!~*'()")
    return f"{PLACEHOLDER_COVER_URL}?text={text}"


def cover_url_for(book: Any) -> str:
    """Best available cover for a stored book, catalog result or raw mapping.

    Order: stored cover, thumbnail, small thumbnail, then a placeholder
    labelled with the start of the title.
    """
    url = (
        _field(book, "cover_image_url")
        or _field(book, "thumbnail")
        or _field(book, "small_thumbnail", "smallThumbnail")
    )
    return url or placeholder_cover_url(_field(book, "title"))


def _search_params(query: str, limit: int) -> dict:
    params = {
        "q": query,
        "maxResults": max(1, min(limit, MAX_RESULTS)),
        "printType": "books",
    }
    if GOOGLE_BOOKS_API_KEY:
        params["key"] = GOOGLE_BOOKS_API_KEY
    return params


async def search_catalog(query: str, limit: int = CATALOG_SEARCH_LIMIT) -> list[CatalogBook]:
    """Search Google Books by free text (title, author, ...).

    Raises CatalogUnavailable on transport errors and non-2xx responses.
    """
    if not query or not query.strip():
        return []

    try:
        async with httpx.AsyncClient(timeout=GOOGLE_BOOKS_TIMEOUT) as client:
            resp = await client.get(
                f"{GOOGLE_BOOKS_BASE_URL}/volumes",
                params=_search_params(query, limit),
            )
    except httpx.HTTPError as e:
        logger.error("Google Books search error for '%s': %s", query, e)
        raise CatalogUnavailable() from e

    if not 200 <= resp.status_code < 300:
        logger.warning("Google Books search failed: '%s' -> %d", query, resp.status_code)
        raise CatalogUnavailable()

    try:
        items = resp.json().get("items") or []
    except ValueError as e:
        logger.error("Google Books returned invalid JSON for '%s': %s", query, e)
        raise CatalogUnavailable() from e

    return [normalize_volume(item) for item in items]


async def get_volume(volume_id: str) -> CatalogBook:
    """Fetch a single volume by its Google Books id."""
    try:
        async with httpx.AsyncClient(timeout=GOOGLE_BOOKS_TIMEOUT) as client:
            resp = await client.get(f"{GOOGLE_BOOKS_BASE_URL}/volumes/{quote(volume_id, safe='')}")
    except httpx.HTTPError as e:
        logger.error("Google Books volume error for %s: %s", volume_id, e)
        raise CatalogUnavailable("Failed to fetch book details. Please try again.") from e

    if resp.status_code == 404:
        raise NotFound("Catalog volume not found")
    if not 200 <= resp.status_code < 300:
        logger.warning("Google Books volume lookup failed: %s -> %d", volume_id, resp.status_code)
        raise CatalogUnavailable("Failed to fetch book details. Please try again.")

    try:
        item = resp.json()
    except ValueError as e:
        logger.error("Google Books returned invalid JSON for volume %s: %s", volume_id, e)
        raise CatalogUnavailable("Failed to fetch book details. Please try again.") from e

    return normalize_volume(item)


async def similar_books(title: str, author: str = "") -> list[CatalogBook]:
    """Catalog books related to a title, excluding the title itself.

    Best effort: an unavailable catalog yields an empty list.
    """
    query = f"{title} {author}".strip() if author else title
    try:
        books = await search_catalog(query, limit=10)
    except CatalogUnavailable:
        logger.warning("Similar books lookup failed for '%s'", title)
        return []
    return [b for b in books if b.title.lower() != title.lower()]
