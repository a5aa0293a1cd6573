"""
Vector store implementations.
"""
from .base import VectorStoreBase
from .pgvector_store import PgVectorStore
from .repository import DocumentRepositoryBase, DjangoDocumentRepository
from .searcher import SimilaritySearcher
from .writer import ReconcilingWriter, UpsertSummary

__all__ = [
    'VectorStoreBase',
    'PgVectorStore',
    'DocumentRepositoryBase',
    'DjangoDocumentRepository',
    'SimilaritySearcher',
    'ReconcilingWriter',
    'UpsertSummary',
]
