"""HTTP transport shared by the provider clients."""

import logging
from typing import Callable, Dict, Mapping, Optional

import httpx

from carbonaware.config import ProviderConfig
from carbonaware.exceptions import ProviderHttpError
from carbonaware.utils.query_string import build_url_with_query_string


logger = logging.getLogger(__name__)

RETRIABLE_STATUS_CODES = frozenset({httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN})
JSON_HEADERS = {"Accept": "application/json"}

# Receives the request url and its tags, e.g. to annotate a tracing span.
RequestHook = Callable[[str, Mapping[str, str]], None]


def create_http_client(config: ProviderConfig, default_base_url: str, headers: Optional[Dict[str, str]] = None) -> httpx.AsyncClient:
    """Create a reusable client bound to the provider's base url."""
    return httpx.AsyncClient(
        base_url=config.base_url or default_base_url,
        timeout=config.timeout,
        headers={**JSON_HEADERS, **(headers or {})},
    )


class AuthRetryTransport:
    """Issues GET requests and sends a request once more when it is rejected with 401 or 403."""

    def __init__(self, client: httpx.AsyncClient, provider_name: str, request_hook: Optional[RequestHook] = None):
        self.client = client
        self.provider_name = provider_name
        self.request_hook = request_hook
        self.client.headers.update(JSON_HEADERS)

    def set_bearer_authentication_header(self, token: str) -> None:
        self.client.headers["Authorization"] = f"Bearer {token}"

    def set_header(self, name: str, value: str) -> None:
        self.client.headers[name] = value

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self.client.send(request)
        except httpx.RequestError as exc:
            logger.error("%s request error: %s", self.provider_name, exc)
            raise ProviderHttpError(f"Error getting data from {self.provider_name}: {exc}") from exc

    async def get(self, url: str) -> httpx.Response:
        """Perform a GET request, retrying once on an authentication failure."""
        request = self.client.build_request("GET", url)
        response = await self._send(request)

        if response.status_code in RETRIABLE_STATUS_CODES:
            logger.debug("Failed to get url %s with status code %s. Attempting to log in again.", url, response.status_code)
            response = await self._send(request)

        if not response.is_success:
            logger.error(
                "Error getting data from %s. StatusCode: %s. Response: %s",
                self.provider_name,
                response.status_code,
                response.text,
            )
            raise ProviderHttpError(
                f"Error getting data from {self.provider_name}: {response.status_code}",
                response_status=response.status_code,
                body=response.text,
            )

        return response

    async def get_text(self, url: str) -> str:
        response = await self.get(url)
        return response.text or ""

    async def fetch(self, path: str, params: Mapping[str, str], tags: Optional[Mapping[str, str]] = None) -> str:
        """Request ``path`` with the given query parameters and return the body."""
        url = build_url_with_query_string(params, path)

        logger.info("Requesting data using url %s", url)

        if self.request_hook is not None:
            self.request_hook(url, dict(tags or {}))

        result = await self.get_text(url)

        logger.debug("For query %s, received data %s", url, result)

        return result

    async def aclose(self) -> None:
        await self.client.aclose()
