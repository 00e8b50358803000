"""
REST HTTP client for the hosted backend — auth, table and storage endpoints.

Every request carries the project's anon key in `apikey`. Authenticated
requests send the user's access token as bearer; anonymous ones send the
anon key.
"""

from typing import Any, Optional

import httpx

from task_tracker.errors import BackendError

USER_AGENT = "task-tracker/0.1.0"

# Auth, PostgREST and storage each put the human-readable text under a different key.
ERROR_MESSAGE_KEYS = ("msg", "message", "error_description", "error")


class HttpClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json", "apikey": api_key},
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    def _auth_headers(self, authenticated: bool, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        bearer = self._token if authenticated and self._token else self._api_key
        headers = {"Authorization": f"Bearer {bearer}"}
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ERROR_MESSAGE_KEYS:
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return f"HTTP {resp.status_code}: {resp.text[:200]}"

    @staticmethod
    def _decode(resp: httpx.Response) -> Any:
        """204 and empty bodies (PATCH/DELETE with return=minimal) decode to None."""
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise BackendError(
                f"Invalid JSON response (HTTP {resp.status_code}): {resp.text[:200]}", resp.status_code,
            )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
        authenticated: bool = True,
    ) -> Any:
        try:
            resp = await self._client.request(
                method, path,
                params=params, json=json, content=content,
                headers=self._auth_headers(authenticated, headers),
            )
        except httpx.HTTPError as e:
            raise BackendError(f"Request failed: {e}", status=0) from e
        if resp.status_code >= 400:
            raise BackendError(self._error_message(resp), resp.status_code)
        return self._decode(resp)

    async def get(self, path: str, params: Optional[dict[str, str]] = None, authenticated: bool = True) -> Any:
        return await self.request("GET", path, params=params, authenticated=authenticated)

    async def post(
        self,
        path: str,
        body: Any = None,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
        authenticated: bool = True,
    ) -> Any:
        return await self.request("POST", path, params=params, json=body, headers=headers, authenticated=authenticated)

    async def patch(
        self,
        path: str,
        body: Any = None,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        return await self.request("PATCH", path, params=params, json=body, headers=headers)

    async def delete(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        return await self.request("DELETE", path, params=params)

    async def upload(self, path: str, data: bytes, content_type: str = "application/octet-stream") -> Any:
        """Raw-body upload (storage objects)."""
        return await self.request(
            "POST", path, content=data,
            headers={"Content-Type": content_type, "x-upsert": "false"},
        )

    async def close(self) -> None:
        await self._client.aclose()
