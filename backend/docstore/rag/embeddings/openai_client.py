"""
OpenAI embedding client.
"""
from typing import List

from langchain_openai import OpenAIEmbeddings

from docstore.core.config import OPENAI_API_KEY, RAG_EMBEDDING_DIMENSIONS, RAG_EMBEDDING_MODEL
from .client_base import EmbeddingsClientBase

# Texts per request; langchain splits larger inputs itself
OPENAI_EMBEDDING_CHUNK_SIZE = 2048


class OpenAIEmbeddingsClient(EmbeddingsClientBase):
    """Embedding client backed by the OpenAI embeddings API."""

    def __init__(self, api_key: str = None, model_name: str = None, dimensions: int = None):
        """
        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY)
            model_name: Model name (defaults to RAG_EMBEDDING_MODEL)
            dimensions: Vector dimensions (defaults to RAG_EMBEDDING_DIMENSIONS)
        """
        self._api_key = api_key or OPENAI_API_KEY
        if not self._api_key:
            raise ValueError("OpenAI API key is required for embeddings")

        self._model_name = model_name or RAG_EMBEDDING_MODEL
        self._dimensions = dimensions or RAG_EMBEDDING_DIMENSIONS
        self._client = OpenAIEmbeddings(
            model=self._model_name,
            api_key=self._api_key,
            dimensions=self._dimensions,
            chunk_size=OPENAI_EMBEDDING_CHUNK_SIZE,
        )

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed_texts(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        return self._client.embed_documents(texts)

    def embed_query(self, text: str) -> List[float]:
        return self._client.embed_query(text)
