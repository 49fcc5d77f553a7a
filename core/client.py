# =============================================================================
# core/client.py  -  Suarify REST API client
# =============================================================================
#
# A thin wrapper around httpx.AsyncClient bound to the configured base URL
# and API key.  Every tool call goes through exactly one method here.
#
#   get / delete   → arguments travel as query parameters
#   post / patch   → arguments travel as the JSON body
#
# Failures always surface as UpstreamError:
#   - non-2xx response  → status + parsed error body
#   - no response       → status None ("Network" in the envelope)
# 401/403 errors get the sign-up hint appended once, right here, before any
# handler sees them.
#
# No retries and no explicit timeout: a failed call is reported immediately
# and httpx's defaults apply.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from core.config import Settings
from core.errors import UpstreamError, with_auth_hint
from core.models import Failure, Outcome, Success, UpstreamRequest

logger = logging.getLogger(__name__)


def _parse_body(response: httpx.Response) -> Any:
    """Parsed JSON when possible, raw text otherwise, None for an empty body."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class UpstreamClient:
    """Async HTTP client for the Suarify API."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "UpstreamClient":
        return cls(settings)

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.api_key:
            headers["x-api-key"] = self._settings.api_key
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._settings.base_url,
                headers=self._headers(),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        body: Optional[dict[str, Any]] = None,
    ) -> Any:
        client = self._get_client()
        try:
            response = await client.request(method, path, params=params, json=body)
        except httpx.RequestError as exc:
            logger.warning("Upstream %s %s failed without a response: %s", method, path, exc)
            raise UpstreamError(None, None, str(exc) or exc.__class__.__name__) from exc

        payload = _parse_body(response)
        if response.is_error:
            logger.warning("Upstream %s %s returned %s", method, path, response.status_code)
            raise with_auth_hint(UpstreamError(
                response.status_code,
                payload,
                f"Request failed with status code {response.status_code}",
            ))
        return payload

    # --- verb operations -----------------------------------------------------

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, body=body)

    async def patch(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("PATCH", path, body=body)

    async def delete(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("DELETE", path, params=params)

    async def send(self, request: UpstreamRequest) -> Any:
        """Issue a request descriptor through the matching verb operation."""
        method = request.method.upper()
        if method == "GET":
            return await self.get(request.path, request.params)
        if method == "DELETE":
            return await self.delete(request.path, request.params)
        if method == "POST":
            return await self.post(request.path, request.body)
        if method == "PATCH":
            return await self.patch(request.path, request.body)
        raise ValueError(f"Unsupported HTTP method: {request.method}")

    async def call(self, request: UpstreamRequest) -> Outcome:
        """Like send(), but upstream failures come back as a Failure value."""
        try:
            return Success(await self.send(request))
        except UpstreamError as exc:
            return Failure(exc)
