"""
HTTP client for the user API.

Thin async wrapper over httpx. Non-2xx responses raise ApiError carrying
the server's "msg" so the caller can show it to the user.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The server rejected a request or could not be reached."""

    def __init__(self, msg: str | None, status_code: int | None = None) -> None:
        self.msg = msg
        self.status_code = status_code
        super().__init__(msg or f"HTTP {status_code}")


class AuthApiClient:
    """Calls the four auth flow endpoints."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Args:
            base_url: Prefix the user router is mounted at, e.g. http://host:5000/user
            client: Preconfigured httpx client (tests pass one with an ASGI transport)
            timeout: Request timeout in seconds when creating a client
        """
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def send_otp(self, email: str) -> dict[str, Any]:
        return await self._post("/send-otp", {"email": email})

    async def verify_otp(self, email: str, otp: str) -> dict[str, Any]:
        return await self._post("/verify-otp", {"email": email, "otp": otp})

    async def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        return await self._post(
            "/register", {"name": name, "email": email, "password": password}
        )

    async def login(self, email: str, password: str) -> dict[str, Any]:
        return await self._post("/login", {"email": email, "password": password})

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, payload: dict[str, str]) -> dict[str, Any]:
        try:
            response = await self._client.post(path, json=payload)
        except httpx.HTTPError as e:
            logger.error("Request to %s failed: %s", path, e)
            raise ApiError(None) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            raise ApiError(body.get("msg"), response.status_code)
        return body
