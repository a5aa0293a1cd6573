"""
Base class for vector stores.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from docstore.rag.document import Document, StoredDocument
from docstore.rag.embeddings.client_base import EmbeddingsClientBase


class VectorStoreBase(ABC):
    """Base interface for vector stores."""

    def __init__(self, embeddings: EmbeddingsClientBase):
        self.embeddings = embeddings

    @abstractmethod
    def add_vectors(self, vectors: Sequence[Sequence[float]], documents: Sequence[Document]):
        """
        Store documents with precomputed embeddings.

        Args:
            vectors: One embedding per document
            documents: Documents to store, same order as vectors
        """
        pass

    @abstractmethod
    def similarity_search_by_vector_with_score(
        self,
        query_vector: Sequence[float],
        k: int,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[StoredDocument, float]]:
        """
        Query for documents closest to a vector.

        Args:
            query_vector: Query embedding vector
            k: Number of results to return
            filter: Optional metadata filter

        Returns:
            List of (document, distance) tuples, closest first
        """
        pass

    @abstractmethod
    def delete(self, ids: Sequence[str]) -> int:
        """
        Delete documents by id.

        Returns:
            Number of documents deleted
        """
        pass

    def add_documents(self, documents: Sequence[Document]):
        """
        Embed documents with one embeddings call and store them.

        Returns:
            Whatever add_vectors returns
        """
        vectors = self.embeddings.embed_documents(documents)
        return self.add_vectors(vectors, documents)

    def similarity_search_with_score(
        self,
        query: str,
        k: int = 4,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[StoredDocument, float]]:
        """
        Embed a query and return the closest documents with their distances.
        """
        return self.similarity_search_by_vector_with_score(
            self.embeddings.embed_query(query), k, filter
        )

    def similarity_search(
        self,
        query: str,
        k: int = 4,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[StoredDocument]:
        """
        Embed a query and return the closest documents.
        """
        return [document for document, _ in self.similarity_search_with_score(query, k, filter)]
