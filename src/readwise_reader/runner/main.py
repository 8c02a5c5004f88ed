"""
CLI main entry point.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import httpx
import yaml

from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..content import JinaReaderConverter
from ..reader_client import ReaderClient, ReaderError
from ..schemas.document import (
    CreateDocumentRequest,
    ListDocumentsParams,
    UpdateDocumentRequest,
    parse_timestamp,
)
from ..services import BulkDeleteRunner, DocumentListingService, search_documents_by_topic
from . import formatting

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _split_tags(value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    return [t.strip() for t in value.split(",") if t.strip()]


def _timestamp_arg(value: str) -> str:
    """Argparse type for ISO 8601 options; keeps the original text."""
    try:
        parse_timestamp(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO 8601 timestamp: {value!r}")
    return value


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="readwise-reader",
        description="Manage Readwise Reader documents from the command line",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("init", help="Write a default config file")
    subparsers.add_parser("auth", help="Validate the access token")

    # save command
    save_parser = subparsers.add_parser("save", help="Save a document to Reader")
    save_parser.add_argument("url", help="Document URL")
    save_parser.add_argument("--title", type=str, help="Override the title")
    save_parser.add_argument("--tags", type=str, help="Comma-separated tag names")
    save_parser.add_argument(
        "--location",
        choices=["new", "later", "archive", "feed"],
        help="Initial location",
    )
    save_parser.add_argument("--html", type=str, help="Document HTML instead of scraping the URL")

    # list command
    list_parser = subparsers.add_parser("list", help="List documents")
    list_parser.add_argument("--id", type=str, help="Return a single document by id")
    list_parser.add_argument("--limit", type=int, help="Page size")
    list_parser.add_argument("--cursor", type=str, help="Page cursor from a previous call")
    list_parser.add_argument("--category", type=str, help="Filter by category (article, pdf, ...)")
    list_parser.add_argument("--location", type=str, help="Filter by location (new, later, ...)")
    list_parser.add_argument("--tag", type=str, help="Filter by tag name")
    list_parser.add_argument(
        "--updated-after", type=_timestamp_arg, help="ISO 8601 timestamp (server-side)"
    )
    list_parser.add_argument(
        "--added-after", type=_timestamp_arg, help="ISO 8601 timestamp (client-side)"
    )
    list_parser.add_argument(
        "--full-content",
        action="store_true",
        help="Include plain-text content (at most 5 documents)",
    )
    list_parser.add_argument("--html", action="store_true", help="Include raw HTML content")

    # update command
    update_parser = subparsers.add_parser("update", help="Update document metadata")
    update_parser.add_argument("id", help="Document id")
    update_parser.add_argument("--title", type=str)
    update_parser.add_argument("--author", type=str)
    update_parser.add_argument("--summary", type=str)
    update_parser.add_argument("--location", choices=["new", "later", "archive", "feed"])
    update_parser.add_argument("--category", type=str)
    update_parser.add_argument("--tags", type=str, help="Comma-separated tag names")

    # delete commands
    delete_parser = subparsers.add_parser("delete", help="Delete a document")
    delete_parser.add_argument("id", help="Document id")

    bulk_parser = subparsers.add_parser("bulk-delete", help="Delete many documents")
    bulk_parser.add_argument("ids", nargs="+", help="Document ids")

    subparsers.add_parser("tags", help="List all tags")

    search_parser = subparsers.add_parser("search", help="Search documents by topic")
    search_parser.add_argument("terms", nargs="+", help="Search terms (any may match)")

    return parser


async def cmd_auth(client: ReaderClient) -> str:
    response = await client.validate_auth()
    return f"Token is valid: {response.data.get('detail', 'ok')}"


async def cmd_save(client: ReaderClient, parsed: argparse.Namespace) -> str:
    request = CreateDocumentRequest(
        url=parsed.url,
        title=parsed.title,
        tags=_split_tags(parsed.tags),
        location=parsed.location,
        html=parsed.html,
    )
    response = await client.create_document(request)
    return formatting.format_saved(response.data) + formatting.format_messages(response.messages)


async def cmd_list(client: ReaderClient, config: Config, parsed: argparse.Namespace) -> str:
    params = ListDocumentsParams(
        id=parsed.id,
        page_cursor=parsed.cursor,
        limit=parsed.limit,
        category=parsed.category,
        location=parsed.location,
        tag=parsed.tag,
        updated_after=parsed.updated_after,
        added_after=parsed.added_after,
        with_full_content=parsed.full_content,
        with_html_content=parsed.html,
    )
    converter = JinaReaderConverter(
        reader_url=config.content.reader_url,
        api_key=config.content.api_key,
        timeout=config.content.timeout_seconds,
    )
    service = DocumentListingService(client, url_to_text=converter)
    response = await service.list_documents(params)
    return formatting.format_page(response.data) + formatting.format_messages(response.messages)


async def cmd_update(client: ReaderClient, parsed: argparse.Namespace) -> str:
    request = UpdateDocumentRequest(
        title=parsed.title,
        author=parsed.author,
        summary=parsed.summary,
        location=parsed.location,
        category=parsed.category,
        tags=_split_tags(parsed.tags),
    )
    if request.is_empty():
        return "Nothing to update (no fields given)"
    response = await client.update_document(parsed.id, request)
    return formatting.format_updated(response.data) + formatting.format_messages(response.messages)


async def cmd_delete(client: ReaderClient, parsed: argparse.Namespace) -> str:
    response = await client.delete_document(parsed.id)
    return formatting.format_deleted(parsed.id) + formatting.format_messages(response.messages)


async def cmd_bulk_delete(client: ReaderClient, config: Config, parsed: argparse.Namespace) -> str:
    runner = BulkDeleteRunner(client, concurrency=config.bulk.concurrency)
    result = await runner.run(parsed.ids)
    return result.summary()


async def cmd_tags(client: ReaderClient) -> str:
    response = await client.list_tags()
    return formatting.format_tags(response.data)


async def cmd_search(client: ReaderClient, parsed: argparse.Namespace) -> str:
    response = await search_documents_by_topic(client, parsed.terms)
    return formatting.format_documents(response.data)


async def run_command(
    config: Config,
    parsed: argparse.Namespace,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """Run one API command and print its result."""
    async with ReaderClient.from_config(config, transport=transport) as client:
        try:
            if parsed.command == "auth":
                text = await cmd_auth(client)
            elif parsed.command == "save":
                text = await cmd_save(client, parsed)
            elif parsed.command == "list":
                text = await cmd_list(client, config, parsed)
            elif parsed.command == "update":
                text = await cmd_update(client, parsed)
            elif parsed.command == "delete":
                text = await cmd_delete(client, parsed)
            elif parsed.command == "bulk-delete":
                text = await cmd_bulk_delete(client, config, parsed)
            elif parsed.command == "tags":
                text = await cmd_tags(client)
            elif parsed.command == "search":
                text = await cmd_search(client, parsed)
            else:
                print(f"❌ Unknown command: {parsed.command}")
                return 1
        except ReaderError as e:
            logger.debug("Command %s failed", parsed.command, exc_info=True)
            print(f"❌ {e}")
            return 1

    print(text)
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init":
        if parsed.config.exists():
            print(f"❌ {parsed.config} already exists")
            return 1
        create_default_config(parsed.config)
        print(f"✓ Wrote default config to {parsed.config}")
        return 0

    # Load config
    try:
        config = load_config(parsed.config).require_valid()
    except (ConfigValidationError, OSError, yaml.YAMLError) as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    return asyncio.run(run_command(config, parsed))


if __name__ == "__main__":
    sys.exit(main())
