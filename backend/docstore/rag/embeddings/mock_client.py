"""
Mock embedding client for testing.
"""
import hashlib
import random
from typing import List

from docstore.core.config import RAG_EMBEDDING_DIMENSIONS
from .client_base import EmbeddingsClientBase


class MockEmbeddingsClient(EmbeddingsClientBase):
    """Mock embedding client that returns pseudo-random unit vectors per text."""

    def __init__(self, model_name: str = "mock-embedding", dimensions: int = None):
        """
        Initialize mock embedding client.

        Args:
            model_name: Mock model name
            dimensions: Vector dimensions (defaults to RAG_EMBEDDING_DIMENSIONS)
        """
        self._model_name = model_name
        self._dimensions = dimensions or RAG_EMBEDDING_DIMENSIONS
        self.calls: List[List[str]] = []

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _embed(self, text: str) -> List[float]:
        # Seeded from the text so the same text gives the same vector in any process
        seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:16], 16)
        rng = random.Random(seed)
        embedding = [rng.gauss(0, 1) for _ in range(self._dimensions)]
        norm = sum(x**2 for x in embedding) ** 0.5
        return [x / norm for x in embedding]

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        """
        Generate embeddings for texts, recording each call.
        """
        self.calls.append(list(texts))
        return [self._embed(text) for text in texts]

    def embed_query(self, text: str) -> List[float]:
        return self._embed(text)
