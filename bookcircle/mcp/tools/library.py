from bookcircle.mcp.client import BookCircleClient, is_error


async def add_book(client: BookCircleClient, query: str) -> dict:
    """Add the top Google Books match for a query to the library.

    Returns the existing book when it was added before.
    """
    candidates = await client.get("/api/books/catalog", params={"q": query, "limit": 1})
    if is_error(candidates):
        return candidates
    if not candidates:
        return {"error": True, "status": 404, "detail": f"No catalog match for '{query}'"}
    return await client.post("/api/books/resolve", json=candidates[0])
