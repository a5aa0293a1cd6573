"""
Similarity search over a document table.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from docstore.core.errors import ValidationError
from docstore.rag.document import StoredDocument
from .repository import DocumentRepositoryBase


class SimilaritySearcher:
    """Runs nearest-neighbour queries with a metadata filter."""

    def __init__(self, repository: DocumentRepositoryBase, default_filter: Optional[Dict[str, Any]] = None):
        self.repository = repository
        self.default_filter = default_filter

    def search(
        self,
        query_vector: Sequence[float],
        k: int,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[StoredDocument, float]]:
        """
        Find the k stored documents closest to a vector.

        Args:
            query_vector: Query embedding
            k: Maximum number of results
            filter: Metadata containment filter; falls back to the default
                filter, and matches everything when both are absent

        Returns:
            List of (document, distance) tuples, closest first
        """
        if isinstance(k, bool) or not isinstance(k, int) or k < 1:
            raise ValidationError(f"k must be a positive integer, got {k!r}")
        if filter is None:
            filter = self.default_filter
        if filter is not None and not isinstance(filter, dict):
            raise ValidationError("filter must be a mapping")
        if len(query_vector) == 0:
            raise ValidationError("query_vector must not be empty")

        results = self.repository.search([float(x) for x in query_vector], k, filter)

        return [
            (document, distance)
            for document, distance in results
            if distance is not None and document.page_content is not None
        ][:k]
