"""Test fixtures and utilities."""

import httpx
import pytest

from fixtures import AUTH_URL, BASE_URL, TOKEN, make_document, make_page
from readwise_reader.config import RetryConfig
from readwise_reader.reader_client import ReaderClient


@pytest.fixture
def make_client():
    """Build a ReaderClient wired to a MockTransport handler."""

    def factory(handler, retry: RetryConfig | None = None) -> ReaderClient:
        return ReaderClient(
            token=TOKEN,
            base_url=BASE_URL,
            auth_url=AUTH_URL,
            retry=retry,
            transport=httpx.MockTransport(handler),
        )

    return factory


@pytest.fixture
def twelve_documents_three_pages() -> tuple[list[dict], dict]:
    """Twelve documents split 5/5/2 over three cursor-linked pages.

    ``saved_at`` cycles through January..June 2024; doc-04 has none.
    """
    docs = [
        make_document(f"doc-{i:02d}", saved_at=f"2024-0{1 + i % 6}-15T12:00:00+00:00")
        for i in range(12)
    ]
    docs[4]["saved_at"] = None
    pages = {
        None: make_page(docs[0:5], count=12, cursor="c2"),
        "c2": make_page(docs[5:10], count=12, cursor="c3"),
        "c3": make_page(docs[10:12], count=12, cursor=None),
    }
    return docs, pages
