"""
Schemas for Reader documents, tags, list queries and the response envelope.
"""

from .document import (
    CreateDocumentRequest,
    Document,
    DocumentPage,
    ListDocumentsParams,
    Tag,
    UpdateDocumentRequest,
    parse_timestamp,
)
from .envelope import (
    APIMessage,
    APIResponse,
    MessageKind,
    create_response,
    error_message,
    info_message,
)

__all__ = [
    "APIMessage",
    "APIResponse",
    "CreateDocumentRequest",
    "Document",
    "DocumentPage",
    "ListDocumentsParams",
    "MessageKind",
    "Tag",
    "UpdateDocumentRequest",
    "create_response",
    "error_message",
    "info_message",
    "parse_timestamp",
]
