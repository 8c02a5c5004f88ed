"""
Test fixtures for Reader API payloads.

This module provides:
- Sample document and page bodies shaped like ``GET /list/`` responses
- MockTransport handlers that record requests and replay responses
"""

import httpx

BASE_URL = "https://reader.test/api/v3"
AUTH_URL = "https://reader.test/api/v2/auth/"
TOKEN = "test-token-12345"

SAMPLE_ARTICLE_HTML = """
<html>
<head><style>body { color: red; }</style></head>
<body>
  <h1>Why Cursors Beat Offsets</h1>
  <p>Offset pagination drifts when rows are inserted.</p>
  <script>trackPageView();</script>
</body>
</html>
"""


def make_document(doc_id: str, **overrides) -> dict:
    """Reader API document record."""
    doc = {
        "id": doc_id,
        "url": f"https://read.readwise.io/read/{doc_id}",
        "source_url": f"https://example.com/articles/{doc_id}",
        "title": f"Document {doc_id}",
        "author": "Ada Lovelace",
        "source": "Reader RSS",
        "category": "article",
        "location": "later",
        "tags": {},
        "site_name": "example.com",
        "word_count": 1200,
        "created_at": "2024-11-01T09:00:00.000000+00:00",
        "updated_at": "2024-11-02T09:00:00.000000+00:00",
        "published_date": "2024-10-30",
        "summary": "",
        "image_url": None,
        "notes": "",
        "parent_id": None,
        "reading_progress": 0.0,
        "first_opened_at": None,
        "last_opened_at": None,
        "saved_at": "2024-11-01T09:00:00.000000+00:00",
        "last_moved_at": "2024-11-01T09:00:00.000000+00:00",
    }
    doc.update(overrides)
    return doc


def make_page(results: list[dict], count: int | None = None, cursor: str | None = None) -> dict:
    """``GET /list/`` response body."""
    return {
        "count": len(results) if count is None else count,
        "nextPageCursor": cursor,
        "results": results,
    }


class RecordingHandler:
    """MockTransport handler that records requests and replays responses.

    ``responses`` is consumed in order; each entry is an httpx.Response or
    a callable taking the request.
    """

    def __init__(self, responses: list):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        nxt = self.responses.pop(0)
        if callable(nxt):
            return nxt(request)
        return nxt


class PagedListHandler:
    """Serves ``GET /list/`` pages keyed by the ``pageCursor`` query value.

    ``count_response`` answers requests that carry no content flag and no
    cursor when a separate count query is expected.
    """

    def __init__(self, pages: dict, count_response: dict | None = None):
        self.pages = pages
        self.count_response = count_response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        if (
            self.count_response is not None
            and "withHtmlContent" not in params
            and "pageCursor" not in params
        ):
            return httpx.Response(200, json=self.count_response)
        return httpx.Response(200, json=self.pages[params.get("pageCursor")])
