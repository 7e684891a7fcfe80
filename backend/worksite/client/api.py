"""
Thin async HTTP client for the Worksite API.

Unwraps the response envelope: success bodies return their `data`, error
bodies raise ApiError.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

ORGANIZATION_HEADER = "X-Organization-Id"
USER_HEADER = "X-User-Id"


class ApiError(Exception):
    """An error envelope (or an unreachable server) surfaced to the caller."""

    def __init__(
        self,
        status: int,
        code: str,
        message: str,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.message = message
        self.details = details

    def __repr__(self) -> str:
        return f"ApiError(status={self.status}, code={self.code!r}, message={self.message!r})"


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {key: value for key, value in params.items() if value is not None}


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        organization_id: str | None = None,
        user_id: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self.organization_id = organization_id
        self.user_id = user_id

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.organization_id:
            headers[ORGANIZATION_HEADER] = self.organization_id
        if self.user_id:
            headers[USER_HEADER] = self.user_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            response = await self._http.request(
                method,
                path,
                params=_clean_params(params),
                json=json,
                headers=self._headers(),
            )
        except httpx.TransportError as exc:
            raise ApiError(503, "NETWORK_ERROR", str(exc)) from exc

        if response.status_code == 204:
            return None

        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, "INVALID_RESPONSE", response.text) from None

        if not body.get("success", False):
            error = body.get("error") or {}
            raise ApiError(
                response.status_code,
                error.get("code", "UNKNOWN_ERROR"),
                error.get("message", "Request failed"),
                error.get("details"),
            )
        return body.get("data")

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
