"""
Configuration management.
"""
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import ValidationError

# Load environment variables
load_dotenv()

# Database configuration
DB_NAME = os.getenv('DB_NAME', 'docstore')
DB_USER = os.getenv('DB_USER', 'postgres')
DB_PASSWORD = os.getenv('DB_PASSWORD', 'postgres')
DB_HOST = os.getenv('DB_HOST', 'localhost')
DB_PORT = os.getenv('DB_PORT', '5432')

# Document table
DOCSTORE_TABLE_NAME = os.getenv('DOCSTORE_TABLE_NAME', 'documents')
DOCSTORE_UPSERT_BATCH_SIZE = int(os.getenv('DOCSTORE_UPSERT_BATCH_SIZE', '500'))
DOCSTORE_DISTANCE = os.getenv('DOCSTORE_DISTANCE', 'cosine')

# Decision logging for the writer; presence of either variable turns it on
DOCSTORE_VERBOSE = (
    os.getenv('DOCSTORE_VERBOSE') is not None
    or os.getenv('LANGCHAIN_VERBOSE') is not None
)

# OpenAI configuration
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')
RAG_EMBEDDING_MODEL = os.getenv('RAG_EMBEDDING_MODEL', 'text-embedding-3-small')
RAG_EMBEDDING_DIMENSIONS = int(os.getenv('RAG_EMBEDDING_DIMENSIONS', '1536'))

DISTANCE_STRATEGIES = ('cosine', 'l2', 'inner_product')


def connection_options_from_env() -> Dict[str, Any]:
    """
    Build storage connection options from the DB_* environment variables.
    """
    return {
        'host': DB_HOST,
        'port': DB_PORT,
        'user': DB_USER,
        'password': DB_PASSWORD,
        'database': DB_NAME,
    }


@dataclass
class VectorStoreConfig:
    """Construction options for a document store."""
    connection_options: Dict[str, Any] = None
    table_name: str = None
    filter: Optional[Dict[str, Any]] = None  # default metadata filter for searches
    verbose: bool = None
    batch_size: int = None
    dimensions: Optional[int] = None  # enables the HNSW index when set
    distance_strategy: str = None

    def __post_init__(self):
        """Fill unset fields from the environment and validate."""
        if not self.connection_options:
            raise ValidationError("connection_options are required")
        if self.table_name is None:
            self.table_name = DOCSTORE_TABLE_NAME
        if self.verbose is None:
            self.verbose = DOCSTORE_VERBOSE
        if self.batch_size is None:
            self.batch_size = DOCSTORE_UPSERT_BATCH_SIZE
        if self.distance_strategy is None:
            self.distance_strategy = DOCSTORE_DISTANCE

        if not self.table_name:
            raise ValidationError("table_name must not be empty")
        if self.batch_size < 1:
            raise ValidationError(f"batch_size must be positive, got {self.batch_size}")
        if self.distance_strategy not in DISTANCE_STRATEGIES:
            raise ValidationError(
                f"Unknown distance strategy '{self.distance_strategy}', "
                f"expected one of {', '.join(DISTANCE_STRATEGIES)}"
            )
        if self.filter is not None and not isinstance(self.filter, dict):
            raise ValidationError("filter must be a mapping")
        if self.dimensions is not None and self.dimensions < 1:
            raise ValidationError(f"dimensions must be positive, got {self.dimensions}")
