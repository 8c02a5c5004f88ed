"""
Services composed on top of the Reader client.
"""

from .bulk_delete import BulkDeleteResult, BulkDeleteRunner, DeleteOutcome
from .document_listing import (
    CONTENT_GUARD_RULES,
    DocumentListingService,
    GuardDecision,
    evaluate_content_guard,
)
from .topic_search import match_documents, search_documents_by_topic

__all__ = [
    "BulkDeleteResult",
    "BulkDeleteRunner",
    "CONTENT_GUARD_RULES",
    "DeleteOutcome",
    "DocumentListingService",
    "GuardDecision",
    "evaluate_content_guard",
    "match_documents",
    "search_documents_by_topic",
]
