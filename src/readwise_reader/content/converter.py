"""
Content conversion for full-content listings.

Two collaborators turn documents into plain text:
- JinaReaderConverter fetches a URL through Jina Reader (network I/O, may fail)
- extract_text_from_html strips inline markup (pure)
"""

import logging
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

# Tags whose text is never part of the readable content
_NON_CONTENT_TAGS = ("script", "style", "noscript", "template")

_BLANK_LINES = re.compile(r"\n\s*\n+")


class ContentConversionError(Exception):
    """URL-to-text conversion failed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to convert {url} to text: {reason}")


def extract_text_from_html(html: str) -> str:
    """Extract readable text from HTML markup."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    text = soup.get_text("\n", strip=True)
    return _BLANK_LINES.sub("\n\n", text).strip()


class JinaReaderConverter:
    """
    URL-to-text converter backed by Jina Reader.

    Calling the converter returns LLM-friendly markdown for the page at
    ``url``. Without an API key Jina applies a lower rate limit.
    """

    DEFAULT_READER_URL = "https://r.jina.ai/"
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        reader_url: str = DEFAULT_READER_URL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.reader_url = reader_url if reader_url.endswith("/") else f"{reader_url}/"
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

        if not api_key:
            logger.debug("Jina API key is not set; using the anonymous rate limit")

    def _headers(self) -> dict[str, str]:
        headers = {"X-Return-Format": "markdown", "Accept": "text/plain"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def __call__(self, url: str, category_hint: Optional[str] = None) -> str:
        """Convert the page at ``url`` to text.

        Raises:
            ContentConversionError: on transport failure or non-2xx status
        """
        logger.debug("Converting %s (category=%s) via Jina Reader", url, category_hint or "-")
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers=self._headers(),
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            try:
                response = await client.get(f"{self.reader_url}{url}")
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise ContentConversionError(url, f"HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ContentConversionError(url, str(e) or type(e).__name__) from e
        return response.text.strip()
