"""
Bulk document deletion.

Ids are processed in sequential batches; deletions within a batch run
concurrently and the whole batch settles before the next one starts.
A failure is recorded against its id and never stops the run.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from ..reader_client.client import ReaderClient

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5


@dataclass
class DeleteOutcome:
    """Result for a single id."""

    id: str
    success: bool
    error: Optional[str] = None


@dataclass
class BulkDeleteResult:
    """Per-id outcomes in input order."""

    outcomes: list[DeleteOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> list[DeleteOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[DeleteOutcome]:
        return [o for o in self.outcomes if not o.success]

    def summary(self) -> str:
        text = (
            "Bulk delete completed.\n\n"
            f"Successfully deleted: {len(self.succeeded)}/{self.total} documents"
        )
        failed = self.failed
        if failed:
            text += f"\n\nFailed to delete {len(failed)} documents:\n"
            text += "\n".join(f"- {o.id}: {o.error}" for o in failed)
        return text


class BulkDeleteRunner:
    """Deletes many documents with at most ``concurrency`` requests in flight."""

    def __init__(self, client: "ReaderClient", concurrency: int = DEFAULT_CONCURRENCY):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.concurrency = concurrency

    async def run(self, document_ids: Sequence[str]) -> BulkDeleteResult:
        result = BulkDeleteResult()

        for start in range(0, len(document_ids), self.concurrency):
            batch = list(document_ids[start : start + self.concurrency])
            logger.debug("Deleting batch %d: %s", start // self.concurrency + 1, batch)
            settled = await asyncio.gather(
                *(self.client.delete_document(doc_id) for doc_id in batch),
                return_exceptions=True,
            )
            for doc_id, outcome in zip(batch, settled):
                if isinstance(outcome, Exception):
                    logger.warning("Failed to delete document %s: %s", doc_id, outcome)
                    result.outcomes.append(
                        DeleteOutcome(id=doc_id, success=False, error=str(outcome) or "Unknown error")
                    )
                elif isinstance(outcome, BaseException):
                    raise outcome
                else:
                    result.outcomes.append(DeleteOutcome(id=doc_id, success=True))

        logger.info(
            "Bulk delete finished: %d succeeded, %d failed",
            len(result.succeeded),
            len(result.failed),
        )
        return result
