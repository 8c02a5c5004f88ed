"""
Topic search over the complete document set.

The service has no full-text search, so every document is fetched
(without content) and matched locally against title, summary, notes
and tag names.
"""

import logging
import re
from typing import TYPE_CHECKING, Sequence

from ..reader_client.pagination import fetch_all_documents
from ..schemas.document import Document, ListDocumentsParams
from ..schemas.envelope import APIResponse, create_response

if TYPE_CHECKING:
    from ..reader_client.client import ReaderClient

logger = logging.getLogger(__name__)


def _searchable_text(doc: Document) -> str:
    fields = [doc.title or "", doc.summary or "", doc.notes or "", " ".join(doc.tag_names())]
    return " ".join(fields).lower()


def match_documents(documents: Sequence[Document], search_terms: Sequence[str]) -> list[Document]:
    """Documents matching any term (literal, case-insensitive), in input order."""
    patterns = [re.compile(re.escape(term), re.IGNORECASE) for term in search_terms]
    return [
        doc
        for doc in documents
        if any(p.search(_searchable_text(doc)) for p in patterns)
    ]


async def search_documents_by_topic(
    client: "ReaderClient", search_terms: Sequence[str]
) -> APIResponse[list[Document]]:
    documents = await fetch_all_documents(client, ListDocumentsParams())
    matches = match_documents(documents, search_terms)
    logger.info("Topic search %s: %d of %d documents matched", list(search_terms), len(matches), len(documents))
    return create_response(matches)
