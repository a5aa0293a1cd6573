"""
Retriever over a vector store with a fixed k and metadata filter.
"""
from typing import Any, Dict, List, Optional

from docstore.core.errors import ValidationError
from docstore.rag.document import StoredDocument


class DocumentRetriever:
    """Returns the closest stored documents for a text query."""

    def __init__(self, store, k: int = 4, filter: Optional[Dict[str, Any]] = None):
        """
        Args:
            store: Any VectorStoreBase implementation
            k: Documents returned per query
            filter: Metadata filter applied to every query
        """
        if k < 1:
            raise ValidationError(f"k must be positive, got {k}")
        self.store = store
        self.k = k
        self.filter = filter

    def retrieve(self, query: str) -> List[StoredDocument]:
        """
        Retrieve relevant documents for a query.
        """
        return self.store.similarity_search(query, self.k, self.filter)

    def retrieve_with_scores(self, query: str) -> List[tuple]:
        return self.store.similarity_search_with_score(query, self.k, self.filter)
