"""
Document listing service.

Composes the full "list documents" behaviour on top of single-page
client calls, in this order:

1. Content guard: full-content requests are capped by a rule table
   keyed on the number of matching documents
2. ``added_after``: filtered client-side on ``saved_at``; the whole set
   is aggregated first unless the caller pinned a cursor or limit
3. Hydration: documents get plain-text ``content`` concurrently, each
   one isolated from the others' failures
4. Presentation: ``html_content`` and ``content`` only when asked for
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Protocol

from ..content.converter import extract_text_from_html
from ..reader_client.pagination import fetch_all_documents
from ..schemas.document import Document, DocumentPage, ListDocumentsParams, parse_timestamp
from ..schemas.envelope import (
    APIMessage,
    APIResponse,
    create_response,
    error_message,
    info_message,
)

if TYPE_CHECKING:
    from ..reader_client.client import ReaderClient

logger = logging.getLogger(__name__)

# Documents returned with full content when more match
FULL_CONTENT_PAGE_SIZE = 5
# Above this many matches, full content is reported as unsupported
FULL_CONTENT_SUPPORTED_MAX = 20
# Categories hydrated from their source URL even when markup is inline
URL_CONVERSION_CATEGORIES = ("", "article", "pdf")


class UrlToText(Protocol):
    async def __call__(self, url: str, category_hint: Optional[str] = None) -> str: ...


MarkupToText = Callable[[str], str]


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of the content guard: page limit (None = untouched) and advisory."""

    limit: Optional[int]
    message: Optional[APIMessage]


@dataclass(frozen=True)
class ContentGuardRule:
    name: str
    matches: Callable[[int], bool]
    decide: Callable[[int, int], GuardDecision]


def _return_all(count: int, returned: int) -> GuardDecision:
    return GuardDecision(limit=None, message=None)


def _truncate_with_info(count: int, returned: int) -> GuardDecision:
    return GuardDecision(
        limit=returned,
        message=info_message(
            f"Found {count} documents, but only returning the first "
            f"{returned} due to full content request. "
            f"To get the remaining {count - returned} documents with full "
            "content, you can fetch them individually by their IDs."
        ),
    )


def _truncate_with_error(count: int, returned: int) -> GuardDecision:
    return GuardDecision(
        limit=returned,
        message=error_message(
            f"Found {count} documents, but only returning the first "
            f"{returned} due to full content request. "
            f"Getting full content for more than {FULL_CONTENT_SUPPORTED_MAX} documents "
            "is not supported due to performance limitations."
        ),
    )


# Evaluated top to bottom; the first matching rule wins.
CONTENT_GUARD_RULES: tuple[ContentGuardRule, ...] = (
    ContentGuardRule("return-all", lambda c: c <= FULL_CONTENT_PAGE_SIZE, _return_all),
    ContentGuardRule("truncate-info", lambda c: c <= FULL_CONTENT_SUPPORTED_MAX, _truncate_with_info),
    ContentGuardRule("truncate-error", lambda c: True, _truncate_with_error),
)


def _guarded_limit(caller_limit: Optional[int], guard_limit: int) -> int:
    if caller_limit:
        return min(caller_limit, guard_limit)
    return guard_limit


def evaluate_content_guard(count: int, caller_limit: Optional[int] = None) -> GuardDecision:
    """Apply CONTENT_GUARD_RULES to a match count.

    A caller limit below the page size is kept, and the advisory reports
    the number of documents actually returned.
    """
    returned = _guarded_limit(caller_limit, FULL_CONTENT_PAGE_SIZE)
    for rule in CONTENT_GUARD_RULES:
        if rule.matches(count):
            logger.debug("Content guard: %d matches -> %s", count, rule.name)
            return rule.decide(count, returned)
    raise ValueError(f"No content guard rule matched count={count}")


class DocumentListingService:
    """
    Orchestrates document listing.

    Collaborators are injected: ``url_to_text`` may do network I/O and
    may fail, ``markup_to_text`` is pure.
    """

    def __init__(
        self,
        client: "ReaderClient",
        url_to_text: UrlToText,
        markup_to_text: MarkupToText = extract_text_from_html,
    ):
        self.client = client
        self.url_to_text = url_to_text
        self.markup_to_text = markup_to_text

    async def list_documents(
        self, params: Optional[ListDocumentsParams] = None
    ) -> APIResponse[DocumentPage]:
        """
        List documents with guards, client-side filtering and hydration.

        Args:
            params: Query configuration; ``with_full_content`` and
                ``added_after`` are handled here and never sent

        Returns:
            APIResponse whose messages carry any advisories
        """
        params = params or ListDocumentsParams()
        wants_content = params.with_full_content
        wants_html = params.with_html_content

        # Inline markup is needed for hydration even if it is not returned
        remote = replace(
            params,
            added_after=None,
            with_full_content=False,
            with_html_content=wants_html or wants_content,
        )

        guard_messages: list[APIMessage] = []
        filter_messages: list[APIMessage] = []

        if params.added_after:
            if wants_content and remote.is_paginated:
                # Cap the remote page so its cursor resumes after the last returned document
                remote = replace(remote, limit=_guarded_limit(remote.limit, FULL_CONTENT_PAGE_SIZE))
            page, disclosure = await self._fetch_filtered(remote, parse_timestamp(params.added_after))
            filter_messages.append(disclosure)
            if wants_content:
                decision = evaluate_content_guard(page.count)
                if decision.limit is not None:
                    page.results = page.results[: decision.limit]
                if decision.message:
                    guard_messages.append(decision.message)
        else:
            page, decision = await self._fetch_guarded(remote, wants_content)
            if decision and decision.message:
                guard_messages.append(decision.message)

        messages = guard_messages + filter_messages

        if wants_content:
            failed = await self._hydrate(page.results)
            if failed:
                messages.append(
                    info_message(
                        f"Full content could not be retrieved for {len(failed)} "
                        f"document(s): {', '.join(failed)}. Their content is empty."
                    )
                )

        for doc in page.results:
            if not wants_html:
                doc.html_content = None
            if not wants_content:
                doc.content = None

        return create_response(page, messages)

    async def _fetch_guarded(
        self, remote: ListDocumentsParams, wants_content: bool
    ) -> tuple[DocumentPage, Optional[GuardDecision]]:
        decision = None
        if wants_content:
            count_response = await self.client.list_documents(remote.without_content())
            decision = evaluate_content_guard(count_response.data.count, remote.limit)
            if decision.limit is not None:
                remote = replace(remote, limit=decision.limit)

        response = await self.client.list_documents(remote)
        return response.data, decision

    async def _fetch_filtered(
        self, remote: ListDocumentsParams, moment: datetime
    ) -> tuple[DocumentPage, APIMessage]:
        if remote.is_paginated:
            # Only the requested window is filtered; other pages are not consulted
            page = (await self.client.list_documents(remote)).data
            kept = [d for d in page.results if d.saved_after(moment)]
            logger.info("Filtered page by added_after: kept %d of %d", len(kept), len(page.results))
            disclosure = info_message(
                "Documents were filtered client-side based on the addedAfter date. "
                "Only the requested page was filtered by saved_at; matching documents "
                "on other pages are not included."
            )
            return DocumentPage(count=len(kept), results=kept, next_page_cursor=page.next_page_cursor), disclosure

        documents = await fetch_all_documents(self.client, remote)
        kept = [d for d in documents if d.saved_after(moment)]
        logger.info("Filtered all documents by added_after: kept %d of %d", len(kept), len(documents))
        disclosure = info_message(
            "Documents were filtered client-side based on the addedAfter date. "
            "All documents were fetched from the API first, then filtered by their saved_at date."
        )
        return DocumentPage(count=len(kept), results=kept, next_page_cursor=None), disclosure

    async def _hydrate(self, documents: list[Document]) -> list[str]:
        """Fill ``content`` for every document; returns ids that failed."""
        outcomes = await asyncio.gather(*(self._hydrate_one(doc) for doc in documents))
        return [doc.id for doc, ok in zip(documents, outcomes) if not ok]

    async def _hydrate_one(self, doc: Document) -> bool:
        try:
            doc.content = await self._document_text(doc)
        except Exception as e:
            logger.warning("Could not load content for document %s: %s", doc.id, e)
            doc.content = ""
            return False
        return True

    async def _document_text(self, doc: Document) -> str:
        if doc.html_content and (doc.category or "") not in URL_CONVERSION_CATEGORIES:
            return self.markup_to_text(doc.html_content)

        url = doc.content_url
        if not url:
            return ""
        return await self.url_to_text(url, doc.category)
