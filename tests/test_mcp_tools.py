"""Tests for MCP tools. Each test gets a BookCircleClient backed by the
test httpx client fixture, seeds data via the API, then calls the tool
function directly."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from bookcircle.errors import CatalogUnavailable
from bookcircle.mcp.client import BookCircleClient
from bookcircle.mcp.tools.discovery import get_book, resolve_query, search_books
from bookcircle.mcp.tools.library import add_book
from bookcircle.mcp.tools.posts import comment_on_post, list_posts, upvote_post, write_post
from bookcircle.mcp.tools.reading_lists import (
    add_to_reading_list,
    browse_reading_lists,
    create_reading_list,
)
from bookcircle.services.google_books import CatalogBook

DUNE = CatalogBook(google_books_id="dune-1", title="Dune", authors=["Frank Herbert"], author="Frank Herbert")
MESSIAH = CatalogBook(google_books_id="dune-2", title="Dune Messiah", authors=["Frank Herbert"], author="Frank Herbert")


@pytest.fixture
def bc(client):
    return BookCircleClient(client)


def _catalog(*books):
    return patch("bookcircle.services.resolver.search_catalog", new_callable=AsyncMock, return_value=list(books))


# --- search_books / get_book ---

@pytest.mark.asyncio
async def test_search_books_merges(bc):
    await bc.post("/api/books/resolve", json={"google_books_id": "dune-1", "title": "Dune", "author": "Frank Herbert"})
    with _catalog(DUNE, MESSIAH):
        result = await search_books(bc, "dune")
    assert [b["source"] for b in result] == ["local", "catalog"]


@pytest.mark.asyncio
async def test_search_books_empty(bc):
    with _catalog():
        assert await search_books(bc, "nothing") == []


@pytest.mark.asyncio
async def test_get_book_not_found(bc):
    result = await get_book(bc, book_id=12345)
    assert result["error"] is True
    assert result["status"] == 404


@pytest.mark.asyncio
async def test_search_books_passes_api_errors_through():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(422, json={"detail": "q is required"})
    )
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        bc = BookCircleClient(http)
        searched = await search_books(bc, "dune")
        resolved = await resolve_query(bc, "dune")

    assert searched == {"error": True, "status": 422, "detail": "q is required"}
    assert resolved == searched


# --- resolve_query ---

@pytest.mark.asyncio
async def test_resolve_query_prefers_local(bc):
    book = await bc.post("/api/books", json={"title": "Dune", "author": "Frank Herbert"})
    with _catalog(DUNE):
        ref = await resolve_query(bc, "dune")
    assert ref == {"book_id": book["id"]}


@pytest.mark.asyncio
async def test_resolve_query_falls_back_to_catalog(bc):
    with _catalog(MESSIAH):
        ref = await resolve_query(bc, "messiah")
    assert ref["catalog_book"]["google_books_id"] == "dune-2"


@pytest.mark.asyncio
async def test_resolve_query_no_match(bc):
    with _catalog():
        ref = await resolve_query(bc, "zzz")
    assert ref["error"] is True


# --- add_book ---

@pytest.mark.asyncio
async def test_add_book_twice_returns_same_book(bc):
    with patch("bookcircle.services.google_books.search_catalog", new_callable=AsyncMock, return_value=[DUNE]):
        first = await add_book(bc, "dune")
        second = await add_book(bc, "dune")
    assert first["id"] == second["id"]
    assert first["google_books_id"] == "dune-1"


@pytest.mark.asyncio
async def test_add_book_catalog_down(bc):
    with patch(
        "bookcircle.services.google_books.search_catalog",
        new_callable=AsyncMock,
        side_effect=CatalogUnavailable(),
    ):
        result = await add_book(bc, "dune")
    assert result["error"] is True
    assert result["status"] == 502


@pytest.mark.asyncio
async def test_add_book_no_match(bc):
    with patch("bookcircle.services.google_books.search_catalog", new_callable=AsyncMock, return_value=[]):
        result = await add_book(bc, "zzz")
    assert result["status"] == 404


# --- posts ---

@pytest.mark.asyncio
async def test_write_review_from_catalog(bc):
    with _catalog(DUNE):
        post = await write_post(bc, title="Loved it", author_name="paul", book="dune", rating=5)
    assert post["type"] == "review"
    assert post["book"]["title"] == "Dune"
    assert post["secret_key"]


@pytest.mark.asyncio
async def test_write_review_without_book_is_rejected(bc):
    result = await write_post(bc, title="Loved it", author_name="paul", rating=5)
    assert result["status"] == 422


@pytest.mark.asyncio
async def test_discussion_comment_and_upvote(bc):
    post = await write_post(bc, title="Best sci-fi?", author_name="paul")
    assert post["type"] == "discussion"

    comment = await comment_on_post(bc, post_id=post["id"], author_name="chani", content="Dune.")
    assert comment["content"] == "Dune."

    upvoted = await upvote_post(bc, post_id=post["id"])
    assert upvoted["upvotes"] == 1

    posts = await list_posts(bc, query="sci-fi", sort="upvotes")
    assert [p["id"] for p in posts] == [post["id"]]


# --- reading lists ---

@pytest.mark.asyncio
async def test_reading_list_tools(bc):
    reading_list = await create_reading_list(bc, name="Desert planets", author_name="liet")

    with _catalog(DUNE):
        added = await add_to_reading_list(bc, list_id=reading_list["id"], book="dune")
        again = await add_to_reading_list(bc, list_id=reading_list["id"], book="dune")
    assert added["detail"] == "Book added to reading list"
    assert again["status"] == 409

    detail = await browse_reading_lists(bc, list_id=reading_list["id"])
    assert [b["title"] for b in detail["books"]] == ["Dune"]

    all_lists = await browse_reading_lists(bc)
    assert len(all_lists) == 1
