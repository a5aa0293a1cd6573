"""
Base class for embedding clients.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence

from docstore.core.errors import ValidationError
from docstore.rag.document import Document


class EmbeddingsClientBase(ABC):
    """Turns chunk text and queries into vectors of a fixed dimensionality."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        pass

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Length of every vector this client returns; sizes the vector column."""
        pass

    @abstractmethod
    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """
        Embed chunk texts.

        Returns:
            One vector per text, same order
        """
        pass

    @abstractmethod
    def embed_query(self, text: str) -> List[float]:
        pass

    def embed_documents(self, documents: Sequence[Document]) -> List[List[float]]:
        """
        Embed the content of documents in a single embed_texts call.

        Raises:
            ValidationError: if the provider returns a different number of vectors
        """
        if not documents:
            return []
        vectors = self.embed_texts([document.page_content for document in documents])
        if len(vectors) != len(documents):
            raise ValidationError(
                f"{self.model_name} returned {len(vectors)} vectors for {len(documents)} documents"
            )
        return vectors
