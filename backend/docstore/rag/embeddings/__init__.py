"""
Embedding client implementations.
"""
from .client_base import EmbeddingsClientBase
from .openai_client import OpenAIEmbeddingsClient
from .mock_client import MockEmbeddingsClient

__all__ = ['EmbeddingsClientBase', 'OpenAIEmbeddingsClient', 'MockEmbeddingsClient']
