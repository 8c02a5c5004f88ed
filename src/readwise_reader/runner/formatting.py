"""
Plain-text rendering of command results.
"""

import json

from ..schemas.document import Document, DocumentPage, Tag
from ..schemas.envelope import APIMessage


def format_messages(messages: list[APIMessage]) -> str:
    """Trailing ``Messages:`` block, or an empty string."""
    if not messages:
        return ""
    return "\n\nMessages:\n" + "\n".join(m.render() for m in messages)


def format_saved(doc: Document) -> str:
    return (
        "Document saved successfully!\n"
        f"ID: {doc.id}\n"
        f"Title: {doc.title or 'Untitled'}\n"
        f"URL: {doc.url}\n"
        f"Location: {doc.location}"
    )


def format_updated(doc: Document) -> str:
    return f"Document updated successfully!\nID: {doc.id}\nReader URL: {doc.url}"


def format_deleted(document_id: str) -> str:
    return f"Document {document_id} deleted successfully!"


def format_page(page: DocumentPage) -> str:
    return json.dumps(page.to_dict(), indent=2, ensure_ascii=False)


def format_documents(documents: list[Document]) -> str:
    return json.dumps([d.to_dict() for d in documents], indent=2, ensure_ascii=False)


def format_tags(tags: list[Tag]) -> str:
    if not tags:
        return "No tags found"
    return "\n".join(f"- {t.name} ({t.key})" for t in tags)
