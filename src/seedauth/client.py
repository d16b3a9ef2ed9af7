"""SeedAuth client - signed requests to the API.

Every request is signed with the Ed25519 key derived from the configured
seed. No bearer tokens, nothing reusable on the wire.
"""

import json as jsonlib
import logging
from typing import Any, Optional

import httpx

from .keys import derive_key_pair
from .signing import sign_request
from .types import ApiError, Config

logger = logging.getLogger(__name__)


class SeedAuthClient:
    """Signed HTTP client for the API.

    Usage:
        config = load_config("seedauth.json")
        async with SeedAuthClient(config) as client:
            assets = await client.get("/v1/assets")
            result = await client.post("/v1/transfers", body='{"amount": "10"}')
    """

    def __init__(
        self,
        config: Config,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            config: Loaded configuration (api_url and api_key)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = config.api_url.rstrip("/")
        self.key_id = config.api_key.id
        self._key_pair = derive_key_pair(config.api_key.seed)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def get(self, path: str) -> Any:
        """Signed GET request. Returns the decoded JSON response."""
        return await self.request("GET", path)

    async def post(self, path: str, body: str = "") -> Any:
        """Signed POST request with a raw JSON body."""
        return await self.request("POST", path, body=body)

    async def request(self, method: str, path: str, body: Optional[str] = None) -> Any:
        """Sign and send a request.

        Args:
            method: HTTP method
            path: Path (and query) relative to api_url, starting with "/"
            body: Raw request body (optional)

        Returns:
            Decoded JSON response, {} for empty responses.

        Raises:
            ApiError: On non-2xx responses
        """
        if not path.startswith("/"):
            path = "/" + path
        url = httpx.URL(self.base_url + path)
        signed_path = url.raw_path.decode("ascii")
        content = body.encode("utf-8") if body else None

        headers = sign_request(
            key_pair=self._key_pair,
            key_id=self.key_id,
            method=method,
            path=signed_path,
            body=content,
            headers={"Content-Type": "application/json"},
        )

        logger.debug("%s %s", method.upper(), url)
        response = await self._client.request(method, url, content=content, headers=headers)

        if not response.is_success:
            self._handle_error(response)

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            return {"detail": response.text}

    def _handle_error(self, response: httpx.Response) -> None:
        """Raise ApiError for an error response."""
        try:
            data = response.json()
            detail = data.get("detail", jsonlib.dumps(data)) if isinstance(data, dict) else str(data)
        except ValueError:
            detail = response.text

        messages = {
            400: "Bad request",
            401: "Not authenticated",
            403: "Insufficient permissions",
            404: "Not found",
            422: "Validation error",
            429: "Rate limit exceeded",
        }

        logger.debug("API error %d for %s", response.status_code, response.request.url)
        raise ApiError(
            status_code=response.status_code,
            message=messages.get(response.status_code, f"HTTP {response.status_code}"),
            detail=detail,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
