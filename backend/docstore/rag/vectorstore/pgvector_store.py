"""
PostgreSQL vector store using pgvector.
"""
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from docstore.core.config import VectorStoreConfig
from docstore.core.errors import SetupError
from docstore.core.logging import get_logger, setup_logging
from docstore.db.models import get_document_model
from docstore.db.session import register_database, setup_django
from docstore.db.tables import ensure_table
from docstore.rag.document import Document, StoredDocument
from docstore.rag.embeddings.client_base import EmbeddingsClientBase
from docstore.rag.retriever import DocumentRetriever
from .base import VectorStoreBase
from .repository import DjangoDocumentRepository, DocumentRepositoryBase
from .searcher import SimilaritySearcher
from .writer import ReconcilingWriter, UpsertSummary

logger = get_logger(__name__)


class PgVectorStore(VectorStoreBase):
    """PostgreSQL vector store implementation using pgvector."""

    def __init__(
        self,
        embeddings: EmbeddingsClientBase,
        config: VectorStoreConfig,
        repository: Optional[DocumentRepositoryBase] = None
    ):
        """
        Args:
            embeddings: Embedding client used for documents and queries
            config: Store configuration; connection_options are required
            repository: Storage access override; defaults to the Django
                repository on the configured connection
        """
        super().__init__(embeddings)
        if config.dimensions is None:
            config = replace(config, dimensions=getattr(embeddings, 'dimensions', None))

        self.config = config
        self.table_name = config.table_name
        self.filter = config.filter
        self.verbose = config.verbose
        self.using = None
        self.document_model = None

        if repository is None:
            setup_django()
            self.using = register_database(config.connection_options)
            self.document_model = get_document_model(
                config.table_name, config.dimensions, config.distance_strategy
            )
            repository = DjangoDocumentRepository(
                self.document_model, self.using, config.distance_strategy
            )
        self.repository = repository

        if self.verbose:
            setup_logging()

        self.writer = ReconcilingWriter(repository, batch_size=config.batch_size, verbose=config.verbose)
        self.searcher = SimilaritySearcher(repository, default_filter=config.filter)

    @classmethod
    def from_connection(
        cls,
        embeddings: EmbeddingsClientBase,
        connection_options: Dict[str, Any],
        table_name: Optional[str] = None,
        filter: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> 'PgVectorStore':
        """
        Create a store for a database connection.

        Args:
            embeddings: Embedding client
            connection_options: host, port, user, password, database, options
            table_name: Table name (defaults to DOCSTORE_TABLE_NAME)
            filter: Default metadata filter for searches
            **kwargs: Remaining VectorStoreConfig fields
        """
        config = VectorStoreConfig(
            connection_options=connection_options,
            table_name=table_name,
            filter=filter,
            **kwargs
        )
        return cls(embeddings, config)

    @classmethod
    def from_existing_index(
        cls,
        embeddings: EmbeddingsClientBase,
        connection_options: Dict[str, Any],
        **kwargs
    ) -> 'PgVectorStore':
        """Open a store on a table that already holds documents."""
        return cls.from_connection(embeddings, connection_options, **kwargs)

    @classmethod
    def from_documents(
        cls,
        documents: Sequence[Document],
        embeddings: EmbeddingsClientBase,
        connection_options: Dict[str, Any],
        init_table: bool = False,
        **kwargs
    ) -> 'PgVectorStore':
        """
        Create a store and add documents to it.

        Args:
            init_table: Create the table first if it does not exist
        """
        store = cls.from_connection(embeddings, connection_options, **kwargs)
        if init_table:
            store.init_table()
        store.add_documents(documents)
        return store

    @classmethod
    def from_texts(
        cls,
        texts: Sequence[str],
        metadatas: Union[Sequence[Dict[str, Any]], Dict[str, Any], None],
        embeddings: EmbeddingsClientBase,
        connection_options: Dict[str, Any],
        **kwargs
    ) -> 'PgVectorStore':
        """
        Create a store from raw texts, one document per text.

        Args:
            metadatas: One metadata dict per text, or a single dict shared by all
        """
        documents = []
        for index, text in enumerate(texts):
            metadata = metadatas[index] if isinstance(metadatas, (list, tuple)) else metadatas
            documents.append(Document(page_content=text, metadata=dict(metadata or {})))
        return cls.from_documents(documents, embeddings, connection_options, **kwargs)

    def init_table(self) -> bool:
        """
        Create the vector extension and document table if needed.

        Returns:
            True if the table was created by this call
        """
        if self.document_model is None:
            raise SetupError("init_table requires a database-backed store")
        return ensure_table(self.document_model, self.using)

    def add_documents(self, documents: Sequence[Document]) -> UpsertSummary:
        """
        Embed documents with a single embeddings call and reconcile them with the table.
        """
        return super().add_documents(documents)

    def add_vectors(self, vectors: Sequence[Sequence[float]], documents: Sequence[Document]) -> UpsertSummary:
        """
        Reconcile documents and their vectors with the table.

        Stale rows of each submitted source are deleted, unchanged rows are
        skipped and the rest are upserted in batches. Batches committed before
        a failure are not rolled back.
        """
        return self.writer.upsert(documents, vectors)

    def similarity_search_by_vector_with_score(
        self,
        query_vector: Sequence[float],
        k: int,
        filter: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[StoredDocument, float]]:
        return self.searcher.search(query_vector, k, filter)

    def delete(self, ids: Sequence[str]) -> int:
        return self.repository.delete_ids(list(ids))

    def delete_by_source(self, source_name: str, source_type: str) -> int:
        """
        Delete every stored chunk of one source.
        """
        ids = self.repository.list_ids_by_source(source_name, source_type)
        deleted = self.repository.delete_ids(ids)
        logger.debug(f"Deleted {deleted} documents of {source_type}:{source_name}")
        return deleted

    def as_retriever(self, k: int = 4, filter: Optional[Dict[str, Any]] = None):
        """
        Wrap the store in a retriever returning the k closest documents per query.
        """
        return DocumentRetriever(self, k=k, filter=filter)
