from fastmcp import FastMCP

from bookcircle.mcp.client import BookCircleClient
from bookcircle.mcp.tools.discovery import search_books as _search_books, get_book as _get_book
from bookcircle.mcp.tools.library import add_book as _add_book
from bookcircle.mcp.tools.posts import (
    comment_on_post as _comment_on_post,
    list_posts as _list_posts,
    upvote_post as _upvote_post,
    write_post as _write_post,
)
from bookcircle.mcp.tools.reading_lists import (
    add_to_reading_list as _add_to_reading_list,
    browse_reading_lists as _browse_reading_lists,
    create_reading_list as _create_reading_list,
)


def create_mcp_server(client: BookCircleClient) -> FastMCP:
    mcp = FastMCP(
        name="bookcircle",
        instructions=(
            "Bookcircle is a community book-review board. Use these tools to "
            "search books in the library and on Google Books, read and write "
            "reviews and discussions, comment, upvote, and curate reading lists."
        ),
    )

    @mcp.tool()
    async def search_books(query: str) -> list[dict] | dict:
        """Search by title or author. Library books come first (source='local'),
        followed by Google Books results not yet in the library (source='catalog')."""
        return await _search_books(client, query=query)

    @mcp.tool()
    async def get_book(book_id: int) -> dict:
        """Get a library book by id."""
        return await _get_book(client, book_id=book_id)

    @mcp.tool()
    async def add_book(query: str) -> dict:
        """Add the best Google Books match for a title/author query to the
        library. Adding the same book twice returns the existing entry."""
        return await _add_book(client, query=query)

    @mcp.tool()
    async def list_posts(query: str | None = None, sort: str = "created_at", limit: int = 50) -> list[dict]:
        """List posts, newest first or by upvotes (sort='upvotes'), optionally
        filtered by a title query."""
        return await _list_posts(client, query=query, sort=sort, limit=limit)

    @mcp.tool()
    async def write_post(
        title: str,
        author_name: str,
        content: str = "",
        book: str | None = None,
        rating: int | None = None,
    ) -> dict:
        """Write a post. With a rating (1-5) it is a review and needs a book
        (title/author query); without one it is a discussion. The response
        holds the secret_key needed to edit or delete the post later."""
        return await _write_post(
            client, title=title, author_name=author_name, content=content, book=book, rating=rating
        )

    @mcp.tool()
    async def comment_on_post(post_id: int, author_name: str, content: str) -> dict:
        """Add a comment to a post."""
        return await _comment_on_post(client, post_id=post_id, author_name=author_name, content=content)

    @mcp.tool()
    async def upvote_post(post_id: int) -> dict:
        """Upvote a post."""
        return await _upvote_post(client, post_id=post_id)

    @mcp.tool()
    async def browse_reading_lists(list_id: int | None = None) -> dict | list:
        """List all reading lists with their books, or get one list by id."""
        return await _browse_reading_lists(client, list_id=list_id)

    @mcp.tool()
    async def create_reading_list(name: str, author_name: str, description: str | None = None) -> dict:
        """Create a new reading list."""
        return await _create_reading_list(client, name=name, author_name=author_name, description=description)

    @mcp.tool()
    async def add_to_reading_list(list_id: int, book: str) -> dict:
        """Add a book (title/author query) to a reading list. A book can only
        appear once per list."""
        return await _add_to_reading_list(client, list_id=list_id, book=book)

    return mcp
