from bookcircle.mcp.client import BookCircleClient, is_error


async def search_books(client: BookCircleClient, query: str) -> list[dict] | dict:
    """Merged library and Google Books search. API errors come back as an
    error dict rather than an empty list."""
    return await client.get("/api/books/search", params={"q": query})


async def get_book(client: BookCircleClient, book_id: int) -> dict:
    return await client.get(f"/api/books/{book_id}")


async def resolve_query(client: BookCircleClient, query: str) -> dict:
    """Request body identifying the best match for a query: a local book_id
    when the library has one, otherwise the top catalog record."""
    results = await search_books(client, query)
    if is_error(results):
        return results
    if not results:
        return {"error": True, "status": 404, "detail": f"No book found for '{query}'"}
    best = results[0]
    if best.get("source") == "local":
        return {"book_id": best["id"]}
    return {"catalog_book": best}
