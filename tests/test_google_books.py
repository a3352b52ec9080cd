"""Tests for the Google Books API client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from bookcircle.errors import CatalogUnavailable, NotFound
from bookcircle.services.google_books import (
    CatalogBook,
    cover_url_for,
    extract_isbn,
    format_published_date,
    get_volume,
    normalize_volume,
    search_catalog,
    similar_books,
)


def test_format_published_date_year_only():
    assert format_published_date("2017") == "2017-01-01"


def test_format_published_date_year_month():
    assert format_published_date("2017-03") == "2017-03-01"


def test_format_published_date_full_date_unchanged():
    assert format_published_date("2017-03-15") == "2017-03-15"


def test_format_published_date_other_format_unchanged():
    assert format_published_date("circa 1850") == "circa 1850"


def test_format_published_date_none():
    assert format_published_date(None) is None
    assert format_published_date("") is None


def test_extract_isbn10_only():
    identifiers = [{"type": "ISBN_10", "identifier": "0131103628"}]
    assert extract_isbn(identifiers, "ISBN_10") == "0131103628"
    assert extract_isbn(identifiers, "ISBN_13") is None


def test_extract_isbn_first_match_wins():
    identifiers = [
        {"type": "OTHER", "identifier": "UOM:39015"},
        {"type": "ISBN_13", "identifier": "9780131103627"},
        {"type": "ISBN_13", "identifier": "9999999999999"},
    ]
    assert extract_isbn(identifiers, "ISBN_13") == "9780131103627"


def test_extract_isbn_missing_list():
    assert extract_isbn(None, "ISBN_10") is None


def test_normalize_volume_complete():
    item = {
        "id": "B1hSG45JCX4C",
        "volumeInfo": {
            "title": "Dune",
            "authors": ["Frank Herbert", "Brian Herbert"],
            "publishedDate": "1965",
            "description": "Set on the desert planet Arrakis...",
            "pageCount": 604,
            "categories": ["Fiction", "Science Fiction"],
            "averageRating": 4.5,
            "ratingsCount": 120,
            "language": "en",
            "publisher": "Ace",
            "industryIdentifiers": [
                {"type": "ISBN_10", "identifier": "0441172717"},
                {"type": "ISBN_13", "identifier": "9780441172719"},
            ],
            "imageLinks": {
                "thumbnail": "http://books.google.com/thumb.jpg",
                "smallThumbnail": "http://books.google.com/small.jpg",
            },
            "previewLink": "http://books.google.com/preview",
        },
    }

    book = normalize_volume(item)

    assert book.google_books_id == "B1hSG45JCX4C"
    assert book.title == "Dune"
    assert book.author == "Frank Herbert, Brian Herbert"
    assert book.genre == "Fiction"
    assert book.publication_date == "1965-01-01"
    assert book.page_count == 604
    assert book.isbn10 == "0441172717"
    assert book.isbn13 == "9780441172719"
    assert book.cover_image_url == "http://books.google.com/thumb.jpg"
    assert book.small_thumbnail == "http://books.google.com/small.jpg"
    assert book.average_rating == 4.5
    assert book.ratings_count == 120


def test_normalize_volume_missing_fields():
    book = normalize_volume({"id": "xyz789", "volumeInfo": {}})

    assert book.title == "Unknown Title"
    assert book.authors == ["Unknown Author"]
    assert book.author == "Unknown Author"
    assert book.genre == "Unknown"
    assert book.publication_date is None
    assert book.isbn10 is None
    assert book.isbn13 is None
    assert book.cover_image_url is None
    assert book.page_count is None


def test_normalize_volume_small_thumbnail_fallback():
    item = {"id": "a", "volumeInfo": {"title": "T", "imageLinks": {"smallThumbnail": "http://s.jpg"}}}
    book = normalize_volume(item)
    assert book.thumbnail == "http://s.jpg"
    assert book.cover_image_url == "http://s.jpg"


def test_cover_url_prefers_stored_cover():
    book = {"title": "Dune", "cover_image_url": "http://cover.jpg", "thumbnail": "http://thumb.jpg"}
    assert cover_url_for(book) == "http://cover.jpg"


def test_cover_url_only_small_thumbnail():
    book = CatalogBook(google_books_id="a", title="Dune", small_thumbnail="http://small.jpg")
    assert cover_url_for(book) == "http://small.jpg"


def test_cover_url_raw_small_thumbnail_key():
    assert cover_url_for({"title": "Dune", "smallThumbnail": "http://small.jpg"}) == "http://small.jpg"


def test_cover_url_placeholder_uses_encoded_title_prefix():
    book = CatalogBook(google_books_id="a", title="The Lord of the Rings: The Fellowship")
    url = cover_url_for(book)
    assert url.startswith("https://via.placeholder.com/")
    assert url.endswith("?text=The%20Lord%20of%20the%20Ring")


def _mock_response(status_code, json_data):
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.json.return_value = json_data
    return resp


def _mock_client(**get_kwargs):
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(**get_kwargs)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.mark.asyncio
async def test_search_catalog_success():
    payload = {
        "items": [
            {"id": "v1", "volumeInfo": {"title": "Dune", "authors": ["Frank Herbert"]}},
            {"id": "v2", "volumeInfo": {"title": "Dune Messiah", "authors": ["Frank Herbert"]}},
        ]
    }
    mock_client = _mock_client(return_value=_mock_response(200, payload))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        results = await search_catalog("dune", limit=5)

    assert [b.google_books_id for b in results] == ["v1", "v2"]
    params = mock_client.get.call_args.kwargs["params"]
    assert params["q"] == "dune"
    assert params["maxResults"] == 5
    assert params["printType"] == "books"


@pytest.mark.asyncio
async def test_search_catalog_no_items():
    mock_client = _mock_client(return_value=_mock_response(200, {"totalItems": 0}))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        assert await search_catalog("zzzzqqq") == []


@pytest.mark.asyncio
async def test_search_catalog_blank_query_skips_request():
    mock_client = _mock_client(return_value=_mock_response(200, {}))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        assert await search_catalog("   ") == []

    mock_client.get.assert_not_called()


@pytest.mark.asyncio
async def test_search_catalog_non_2xx_raises():
    mock_client = _mock_client(return_value=_mock_response(503, {}))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        with pytest.raises(CatalogUnavailable):
            await search_catalog("dune")


@pytest.mark.asyncio
async def test_search_catalog_network_error_raises():
    mock_client = _mock_client(side_effect=httpx.ConnectError("Connection refused"))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        with pytest.raises(CatalogUnavailable):
            await search_catalog("dune")


@pytest.mark.asyncio
async def test_get_volume_success():
    item = {"id": "v1", "volumeInfo": {"title": "Dune", "publishedDate": "1965-08"}}
    mock_client = _mock_client(return_value=_mock_response(200, item))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        book = await get_volume("v1")

    assert book.title == "Dune"
    assert book.publication_date == "1965-08-01"


@pytest.mark.asyncio
async def test_get_volume_not_found():
    mock_client = _mock_client(return_value=_mock_response(404, {}))

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        with pytest.raises(NotFound):
            await get_volume("missing")


@pytest.mark.asyncio
async def test_similar_books_excludes_same_title():
    books = [
        CatalogBook(google_books_id="v1", title="Dune"),
        CatalogBook(google_books_id="v2", title="Dune Messiah"),
        CatalogBook(google_books_id="v3", title="DUNE"),
    ]
    with patch("bookcircle.services.google_books.search_catalog", new_callable=AsyncMock, return_value=books) as search:
        result = await similar_books("Dune", "Frank Herbert")

    search.assert_awaited_once_with("Dune Frank Herbert", limit=10)
    assert [b.google_books_id for b in result] == ["v2"]


@pytest.mark.asyncio
async def test_similar_books_swallows_catalog_failure():
    with patch(
        "bookcircle.services.google_books.search_catalog",
        new_callable=AsyncMock,
        side_effect=CatalogUnavailable(),
    ):
        assert await similar_books("Dune") == []


@pytest.mark.asyncio
async def test_get_volume_invalid_json_raises():
    resp = _mock_response(200, None)
    resp.json.side_effect = ValueError("Expecting value")
    mock_client = _mock_client(return_value=resp)

    with patch("bookcircle.services.google_books.httpx.AsyncClient", return_value=mock_client):
        with pytest.raises(CatalogUnavailable):
            await get_volume("v1")


def test_normalize_drops_out_of_range_fields():
    book = normalize_volume({
        "id": "v1",
        "volumeInfo": {
            "title": "Odd",
            "pageCount": -3,
            "industryIdentifiers": [
                {"type": "ISBN_10", "identifier": "123"},
                {"type": "ISBN_13", "identifier": "9780441172719"},
            ],
        },
    })
    assert book.page_count is None
    assert book.isbn10 is None
    assert book.isbn13 == "9780441172719"
