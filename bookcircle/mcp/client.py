from httpx import AsyncClient, Response

# Statuses tools report back to the caller instead of raising. 502 means the
# Google Books catalog is down, which is worth retrying later.
_REPORTED = {400, 403, 404, 409, 422, 502}


class BookCircleClient:
    """Calls the bookcircle API in-process and hands back JSON-ready values.

    Client errors come back as ``{"error": True, "status": ..., "detail": ...}``
    so a tool can return them verbatim; server faults raise RuntimeError.
    """

    def __init__(self, http: AsyncClient) -> None:
        self.http = http

    async def request(self, method: str, path: str, **kwargs) -> dict | list:
        resp = await self.http.request(method, path, **kwargs)
        return self._unwrap(resp)

    async def get(self, path: str, **kwargs) -> dict | list:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> dict | list:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> dict | list:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> dict | list:
        return await self.request("DELETE", path, **kwargs)

    @staticmethod
    def _unwrap(resp: Response) -> dict | list:
        if resp.status_code == 204:
            return {"ok": True}
        if resp.is_success:
            return resp.json()
        if resp.status_code in _REPORTED or resp.status_code < 500:
            detail = resp.json().get("detail", resp.text)
            return {"error": True, "status": resp.status_code, "detail": detail}
        raise RuntimeError(f"Server error {resp.status_code}: {resp.text}")


def is_error(result: dict | list) -> bool:
    return isinstance(result, dict) and bool(result.get("error"))
