from bookcircle.mcp.client import BookCircleClient, is_error
from bookcircle.mcp.tools.discovery import resolve_query


async def browse_reading_lists(
    client: BookCircleClient,
    list_id: int | None = None,
) -> dict | list:
    if list_id is not None:
        return await client.get(f"/api/reading-lists/{list_id}")
    return await client.get("/api/reading-lists")


async def create_reading_list(
    client: BookCircleClient,
    name: str,
    author_name: str,
    description: str | None = None,
) -> dict:
    return await client.post(
        "/api/reading-lists",
        json={"name": name, "author_name": author_name, "description": description},
    )


async def add_to_reading_list(client: BookCircleClient, list_id: int, book: str) -> dict:
    ref = await resolve_query(client, book)
    if is_error(ref):
        return ref
    return await client.post(f"/api/reading-lists/{list_id}/books", json=ref)
