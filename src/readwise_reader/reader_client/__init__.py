"""
Readwise Reader API Client.

Provides:
- Create, list, update and delete documents
- List tags, validate the access token
- Retry/backoff on HTTP 429 (Retry-After aware)
- Cursor pagination helpers that aggregate complete result sets

Token auth only; every call returns an APIResponse envelope.
"""

from .client import (
    RateLimitExceeded,
    ReaderAPIError,
    ReaderClient,
    ReaderError,
    ReaderTransportError,
)
from .pagination import fetch_all, fetch_all_documents

__all__ = [
    "RateLimitExceeded",
    "ReaderAPIError",
    "ReaderClient",
    "ReaderError",
    "ReaderTransportError",
    "fetch_all",
    "fetch_all_documents",
]
