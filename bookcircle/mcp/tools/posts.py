from bookcircle.mcp.client import BookCircleClient, is_error
from bookcircle.mcp.tools.discovery import resolve_query


async def list_posts(
    client: BookCircleClient,
    query: str | None = None,
    sort: str = "created_at",
    limit: int = 50,
) -> list[dict]:
    params = {"sort": sort, "limit": limit}
    if query:
        params["q"] = query
    result = await client.get("/api/posts", params=params)
    if is_error(result):
        return []
    return result


async def write_post(
    client: BookCircleClient,
    title: str,
    author_name: str,
    content: str = "",
    book: str | None = None,
    rating: int | None = None,
) -> dict:
    body = {"title": title, "author_name": author_name, "content": content}
    if rating is not None:
        body["type"] = "review"
        body["rating"] = rating
    if book:
        ref = await resolve_query(client, book)
        if is_error(ref):
            return ref
        body.update(ref)
    return await client.post("/api/posts", json=body)


async def comment_on_post(
    client: BookCircleClient,
    post_id: int,
    author_name: str,
    content: str,
) -> dict:
    return await client.post(
        f"/api/posts/{post_id}/comments",
        json={"author_name": author_name, "content": content},
    )


async def upvote_post(client: BookCircleClient, post_id: int) -> dict:
    return await client.post(f"/api/posts/{post_id}/upvote")
