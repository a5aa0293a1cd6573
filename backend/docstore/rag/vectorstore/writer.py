"""
Reconciling writer: upserts document chunks against what is already stored.

For every source group in a call, stored rows whose ids are not resubmitted
are deleted; resubmitted rows are skipped when their hash is unchanged and
written in fixed-size batches otherwise. Phases commit independently, so a
failure part-way leaves earlier deletes and batches in place.
"""
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

from django.db import Error

from docstore.core.errors import ValidationError, WriteError
from docstore.core.logging import get_logger
from docstore.rag.document import Document, StoredDocument
from docstore.rag.hashing import compute_hash
from docstore.rag.identity import get_source_name, get_source_type, get_unique_id
from .repository import DocumentRepositoryBase

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 500


@dataclass
class UpsertSummary:
    """Counts of the decisions taken by one upsert call."""
    deleted: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    batches: int = 0

    @property
    def written(self) -> int:
        return self.created + self.updated


def build_rows(documents: Sequence[Document], vectors: Sequence[Sequence[float]]) -> List[StoredDocument]:
    """
    Pair documents with their vectors and resolve id, source and hash.

    Rows repeating an id with the same hash collapse into the last one;
    repeating an id with a different hash is rejected.

    Raises:
        ValidationError: on length mismatch or conflicting duplicate ids
    """
    if len(documents) != len(vectors):
        raise ValidationError(
            f"Number of documents ({len(documents)}) must match number of vectors ({len(vectors)})"
        )

    rows: Dict[str, StoredDocument] = {}
    for document, vector in zip(documents, vectors):
        row = StoredDocument(
            id=document.id or get_unique_id(document),
            page_content=document.page_content,
            metadata=dict(document.metadata),
            source_type=get_source_type(document),
            source_name=get_source_name(document),
            hash=document.hash or compute_hash(document.page_content),
            embedding=[float(x) for x in vector],
        )
        previous = rows.pop(row.id, None)
        if previous is not None and previous.hash != row.hash:
            raise ValidationError(f"Id {row.id} was submitted twice with different content")
        rows[row.id] = row
    return list(rows.values())


class ReconcilingWriter:
    """Upsert engine for one document table."""

    def __init__(
        self,
        repository: DocumentRepositoryBase,
        batch_size: int = DEFAULT_BATCH_SIZE,
        verbose: bool = False
    ):
        """
        Args:
            repository: Storage access for the table
            batch_size: Rows per atomic upsert statement
            verbose: Log every delete/skip/update/create decision
        """
        if batch_size < 1:
            raise ValidationError(f"batch_size must be positive, got {batch_size}")
        self.repository = repository
        self.batch_size = batch_size
        self.verbose = verbose

    def upsert(self, documents: Sequence[Document], vectors: Sequence[Sequence[float]]) -> UpsertSummary:
        """
        Reconcile documents and their vectors with the stored rows.

        Args:
            documents: Chunks to store
            vectors: One embedding per document, same order

        Returns:
            UpsertSummary of the decisions taken

        Raises:
            ValidationError: before any I/O, on malformed input
            ReadError: when a lookup or delete fails
            WriteError: when a batch upsert fails; earlier batches stay committed
        """
        rows = build_rows(documents, vectors)
        summary = UpsertSummary()
        if not rows:
            return summary

        summary.deleted = self._delete_stale(rows)
        changed = self._select_changed(rows, summary)
        self._write(changed, summary)

        logger.debug(
            f"Upserted {len(rows)} rows: {summary.created} created, {summary.updated} updated, "
            f"{summary.skipped} skipped, {summary.deleted} deleted in {summary.batches} batches"
        )
        return summary

    def _delete_stale(self, rows: List[StoredDocument]) -> int:
        """Delete stored rows of each submitted source group that were not resubmitted."""
        groups: Dict[Tuple[str, str], Set[str]] = {}
        for row in rows:
            if row.has_source:
                groups.setdefault(row.source_key, set()).add(row.id)

        deleted = 0
        for (source_name, source_type), candidate_ids in groups.items():
            stored_ids = self.repository.list_ids_by_source(source_name, source_type)
            stale_ids = [stored_id for stored_id in stored_ids if stored_id not in candidate_ids]
            if not stale_ids:
                continue
            self._log(
                f"Ids have changed for document {source_name} and {source_type}, "
                f"action: delete these ids: {', '.join(stale_ids)}"
            )
            deleted += self.repository.delete_ids(stale_ids)
        return deleted

    def _select_changed(self, rows: List[StoredDocument], summary: UpsertSummary) -> List[StoredDocument]:
        """Keep the rows that are new or whose hash differs from the stored one."""
        stored_hashes = self.repository.get_hashes([row.id for row in rows])

        changed = []
        for row in rows:
            if row.id not in stored_hashes:
                self._log(f"No document was found for id {row.id}, action: create")
                summary.created += 1
                changed.append(row)
            elif stored_hashes[row.id] == row.hash:
                self._log(f"Same hash was found for id {row.id}, action: ignore")
                summary.skipped += 1
            else:
                self._log(f"Different hash was found for id {row.id}, action: update embedding")
                summary.updated += 1
                changed.append(row)
        return changed

    def _write(self, rows: List[StoredDocument], summary: UpsertSummary) -> None:
        for start in range(0, len(rows), self.batch_size):
            batch = rows[start:start + self.batch_size]
            try:
                self.repository.upsert(batch)
            except Error as e:
                logger.error(f"Batch upsert failed at row {start}: {e}", exc_info=True)
                raise WriteError(
                    f"Error inserting: {batch[0].page_content}",
                    first_content=batch[0].page_content,
                ) from e
            summary.batches += 1

    def _log(self, message: str) -> None:
        if self.verbose:
            logger.info(message)
