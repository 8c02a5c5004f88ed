"""
Readwise Reader API client implementation.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

from ..config import Config, RetryConfig
from ..schemas.document import (
    CreateDocumentRequest,
    Document,
    DocumentPage,
    ListDocumentsParams,
    Tag,
    UpdateDocumentRequest,
)
from ..schemas.envelope import APIResponse, create_response
from .pagination import fetch_all

logger = logging.getLogger(__name__)

# Assumed wait when a 429 carries no usable Retry-After header
DEFAULT_RETRY_AFTER_SECONDS = 60


class ReaderError(Exception):
    """Base exception for Reader client errors."""
    pass


class ReaderAPIError(ReaderError):
    """API returned a non-2xx response other than 429."""
    def __init__(self, status_code: int, status_text: str, response_body: Optional[str] = None):
        self.status_code = status_code
        self.status_text = status_text
        self.response_body = response_body
        super().__init__(
            f"Readwise API error: {status_code} {status_text} - {response_body or ''}"
        )


class RateLimitExceeded(ReaderError):
    """Still rate limited after every retry was spent."""
    def __init__(self, retries: int, retry_after: int):
        self.retries = retries
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded after {retries} retries. "
            f"Please wait {retry_after} seconds before trying again."
        )


class ReaderTransportError(ReaderError):
    """Failed to reach the Reader API (connection, timeout, protocol)."""
    pass


def parse_retry_after(value: Optional[str]) -> int:
    """Seconds from a Retry-After header, defaulting when absent or unparsable."""
    if not value:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(int(value.strip()), 0)
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


class ReaderClient:
    """
    Async client for the Readwise Reader API.

    Features:
    - Create, list, update and delete documents
    - List tags
    - Token validation
    - Retry with exponential backoff on HTTP 429
    """

    DEFAULT_BASE_URL = "https://readwise.io/api/v3"
    DEFAULT_AUTH_URL = "https://readwise.io/api/v2/auth/"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        auth_url: str = DEFAULT_AUTH_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry: Optional[RetryConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Reader client.

        Args:
            token: Readwise access token
            base_url: v3 API root
            auth_url: Absolute URL of the token validation endpoint
            timeout: Request timeout in seconds
            retry: Rate-limit retry policy
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.auth_url = auth_url
        self.retry = retry or RetryConfig()

        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Token {token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "ReaderClient":
        return cls(
            token=config.reader.token,
            base_url=config.reader.base_url,
            auth_url=config.reader.auth_url,
            timeout=config.reader.timeout_seconds,
            retry=config.retry,
            transport=transport,
        )

    async def __aenter__(self) -> "ReaderClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}{endpoint}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Optional[dict] = None,
    ) -> Any:
        """Make an API request, retrying on HTTP 429.

        Returns the decoded JSON body, or None for 204 No Content.
        """
        url = self._build_url(endpoint)
        max_retries = self.retry.max_retries
        retry_after = DEFAULT_RETRY_AFTER_SECONDS

        for attempt in range(max_retries + 1):
            try:
                response = await self._http.request(method, url, params=params, json=json_data)
            except httpx.TimeoutException as e:
                raise ReaderTransportError(f"Request to Readwise timed out: {e}") from e
            except httpx.TransportError as e:
                raise ReaderTransportError(f"Failed to connect to Readwise at {url}: {e}") from e
            except httpx.RequestError as e:
                raise ReaderTransportError(f"Request to Readwise failed: {e}") from e

            if response.is_success:
                if response.status_code == 204:
                    return None
                try:
                    return response.json()
                except ValueError as e:
                    raise ReaderError(
                        f"Invalid JSON in Readwise response ({response.status_code}) from {url}"
                    ) from e

            if response.status_code != 429:
                raise ReaderAPIError(
                    status_code=response.status_code,
                    status_text=response.reason_phrase,
                    response_body=response.text,
                )

            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            if attempt >= max_retries:
                break

            delay_ms = self.retry.delay_ms(attempt, retry_after)
            logger.warning(
                "Rate limited. Retrying in %ds (attempt %d/%d)...",
                round(delay_ms / 1000),
                attempt + 1,
                max_retries,
            )
            await self._sleep(delay_ms / 1000)

        raise RateLimitExceeded(retries=max_retries, retry_after=retry_after)

    async def validate_auth(self) -> APIResponse[dict]:
        """Check the token against the auth endpoint."""
        result = await self._request("GET", self.auth_url)
        return create_response(result or {"detail": "Token is valid"})

    async def create_document(self, data: CreateDocumentRequest) -> APIResponse[Document]:
        result = await self._request("POST", "/save/", json_data=data.to_payload())
        return create_response(Document.from_api_response(result))

    async def list_documents(
        self, params: Optional[ListDocumentsParams] = None
    ) -> APIResponse[DocumentPage]:
        """
        Fetch a single page of documents.

        Only remote filters are applied here; full-content guards,
        client-side date filtering and hydration live in
        services.document_listing.
        """
        params = params or ListDocumentsParams()
        result = await self._request("GET", "/list/", params=params.to_query())
        return create_response(DocumentPage.from_api_response(result))

    async def update_document(
        self, document_id: str, data: UpdateDocumentRequest
    ) -> APIResponse[Document]:
        result = await self._request(
            "PATCH", f"/update/{document_id}/", json_data=data.to_payload()
        )
        return create_response(Document.from_api_response(result))

    async def delete_document(self, document_id: str) -> APIResponse[None]:
        await self._request("DELETE", f"/delete/{document_id}/")
        return create_response(None)

    async def list_tags(self) -> APIResponse[list[Tag]]:
        """List every tag, following page cursors."""

        async def fetch_page(cursor: Optional[str]) -> tuple[list, Optional[str]]:
            result = await self._request(
                "GET", "/tags/", params={"pageCursor": cursor} if cursor else None
            )
            if isinstance(result, list):
                return result, None
            return result.get("results", []), result.get("nextPageCursor") or None

        records = await fetch_all(fetch_page)
        return create_response([Tag.from_api_response(r) for r in records])
