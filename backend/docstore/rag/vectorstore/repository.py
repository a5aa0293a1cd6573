"""
Storage access for document tables.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from django.db import Error, transaction
from pgvector.django import CosineDistance, L2Distance, MaxInnerProduct

from docstore.core.errors import ReadError
from docstore.rag.document import StoredDocument

# Keeps `id IN (...)` lists at a sane size
LOOKUP_BATCH_SIZE = 1000

UPDATE_FIELDS = ['page_content', 'metadata', 'source_type', 'source_name', 'hash', 'embedding']

DISTANCE_FUNCTIONS = {
    'cosine': CosineDistance,
    'l2': L2Distance,
    'inner_product': MaxInnerProduct,
}


class DocumentRepositoryBase(ABC):
    """Base interface for reading and writing stored documents."""

    @abstractmethod
    def list_ids_by_source(self, source_name: str, source_type: str) -> List[str]:
        """
        List ids of all stored rows of one source group.

        Args:
            source_name: Source name of the group
            source_type: Source type of the group
        """
        pass

    @abstractmethod
    def get_hashes(self, ids: List[str]) -> Dict[str, str]:
        """
        Look up stored hashes by id. Ids with no stored row are absent from the result.
        """
        pass

    @abstractmethod
    def delete_ids(self, ids: List[str]) -> int:
        """
        Delete rows by id.

        Returns:
            Number of rows deleted
        """
        pass

    @abstractmethod
    def upsert(self, rows: List[StoredDocument]) -> None:
        """
        Insert or replace rows keyed on id, atomically for the whole list.

        Driver errors propagate unchanged so the caller can attribute them
        to the failing batch.
        """
        pass

    @abstractmethod
    def search(
        self,
        query_vector: List[float],
        k: int,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[StoredDocument, Optional[float]]]:
        """
        Nearest rows to a vector, closest first.

        Args:
            query_vector: Query embedding
            k: Maximum number of rows
            filter: Metadata containment filter; None matches all rows

        Returns:
            List of (document, distance) tuples
        """
        pass


class DjangoDocumentRepository(DocumentRepositoryBase):
    """Document repository backed by a Django model on PostgreSQL + pgvector."""

    def __init__(self, model, using: str, distance_strategy: str = 'cosine'):
        """
        Args:
            model: Document model from get_document_model
            using: Database alias
            distance_strategy: cosine, l2 or inner_product
        """
        self.model = model
        self.using = using
        self.distance_strategy = distance_strategy
        self._distance = DISTANCE_FUNCTIONS[distance_strategy]

    def _objects(self):
        return self.model.objects.using(self.using)

    def list_ids_by_source(self, source_name: str, source_type: str) -> List[str]:
        try:
            return list(
                self._objects()
                .filter(source_name=source_name, source_type=source_type)
                .values_list('id', flat=True)
            )
        except Error as e:
            raise ReadError(f"Failed to list documents of {source_type}:{source_name}: {e}") from e

    def get_hashes(self, ids: List[str]) -> Dict[str, str]:
        hashes = {}
        try:
            for start in range(0, len(ids), LOOKUP_BATCH_SIZE):
                batch = ids[start:start + LOOKUP_BATCH_SIZE]
                hashes.update(self._objects().filter(id__in=batch).values_list('id', 'hash'))
        except Error as e:
            raise ReadError(f"Failed to look up stored documents: {e}") from e
        return hashes

    def delete_ids(self, ids: List[str]) -> int:
        if not ids:
            return 0
        try:
            deleted, _ = self._objects().filter(id__in=ids).delete()
        except Error as e:
            raise ReadError(f"Failed to delete {len(ids)} documents: {e}") from e
        return deleted

    def upsert(self, rows: List[StoredDocument]) -> None:
        objs = [
            self.model(
                id=row.id,
                page_content=row.page_content,
                metadata=row.metadata,
                source_type=row.source_type,
                source_name=row.source_name,
                hash=row.hash,
                embedding=row.embedding,
            )
            for row in rows
        ]
        with transaction.atomic(using=self.using):
            self._objects().bulk_create(
                objs,
                update_conflicts=True,
                unique_fields=['id'],
                update_fields=UPDATE_FIELDS,
            )

    def search(
        self,
        query_vector: List[float],
        k: int,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[StoredDocument, Optional[float]]]:
        queryset = (
            self._objects()
            .defer('embedding')
            .annotate(distance=self._distance('embedding', query_vector))
            .filter(page_content__isnull=False)
        )
        if filter:
            queryset = queryset.filter(metadata__contains=filter)
        queryset = queryset.order_by('distance')[:k]

        try:
            rows = list(queryset)
        except Error as e:
            raise ReadError(f"Similarity search failed: {e}") from e

        return [
            (row.to_stored_document(), float(row.distance) if row.distance is not None else None)
            for row in rows
        ]
