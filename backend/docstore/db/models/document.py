"""
Document table model with vector embeddings.

The table name is configurable, so the model class is built per table at
runtime instead of being declared once. Classes are cached by table name.
"""
import hashlib
import re
from typing import Dict, Optional, Type

from django.contrib.postgres.indexes import GinIndex
from django.db import models
from pgvector.django import HnswIndex, VectorField

from docstore.core.errors import ValidationError
from docstore.rag.document import StoredDocument

APP_LABEL = 'docstore'

# pgvector operator class per distance strategy; must match the search operator
VECTOR_OPCLASSES = {
    'cosine': 'vector_cosine_ops',
    'l2': 'vector_l2_ops',
    'inner_product': 'vector_ip_ops',
}

_document_models: Dict[str, Type[models.Model]] = {}


def _index_name(table_name: str, suffix: str) -> str:
    # Postgres truncates identifiers at 63 bytes
    return f"{table_name[:40]}_{suffix}"


def _class_name(table_name: str) -> str:
    slug = re.sub(r'\W+', '_', table_name).strip('_') or 'table'
    digest = hashlib.sha1(table_name.encode('utf-8')).hexdigest()[:8]
    return f"StoredDocument_{slug}_{digest}"


def _to_stored_document(self) -> StoredDocument:
    """Convert a model instance into a StoredDocument."""
    embedding = None
    if 'embedding' not in self.get_deferred_fields() and self.embedding is not None:
        embedding = [float(x) for x in self.embedding]
    return StoredDocument(
        id=self.id,
        page_content=self.page_content,
        metadata=self.metadata or {},
        source_type=self.source_type,
        source_name=self.source_name,
        hash=self.hash,
        embedding=embedding,
    )


def _str(self):
    return f"{self.id} ({self.source_name or 'no source'})"


def get_document_model(
    table_name: str,
    dimensions: Optional[int] = None,
    distance_strategy: str = 'cosine',
) -> Type[models.Model]:
    """
    Get the model class for a document table, building it on first use.

    Args:
        table_name: Database table name
        dimensions: Embedding dimensionality; enables the HNSW index when set
        distance_strategy: One of VECTOR_OPCLASSES, selects the index opclass

    Returns:
        Unmanaged Django model bound to the table
    """
    if distance_strategy not in VECTOR_OPCLASSES:
        raise ValidationError(f"Unknown distance strategy '{distance_strategy}'")

    model = _document_models.get(table_name)
    if model is not None:
        existing = model._meta.get_field('embedding').dimensions
        if dimensions is not None and existing is not None and existing != dimensions:
            raise ValidationError(
                f"Table '{table_name}' is already bound to {existing} dimensions, "
                f"got {dimensions}"
            )
        if model.distance_strategy != distance_strategy:
            raise ValidationError(
                f"Table '{table_name}' is already bound to the {model.distance_strategy} "
                f"distance, got {distance_strategy}"
            )
        return model

    indexes = [GinIndex(fields=['metadata'], name=_index_name(table_name, 'metadata_gin'))]
    if dimensions is not None:
        indexes.append(
            HnswIndex(
                name=_index_name(table_name, 'embedding_hnsw'),
                fields=['embedding'],
                m=16,
                ef_construction=64,
                opclasses=(VECTOR_OPCLASSES[distance_strategy],),
            )
        )

    meta = type('Meta', (), {
        'app_label': APP_LABEL,
        'db_table': table_name,
        'managed': False,
        'indexes': indexes,
    })

    attrs = {
        '__module__': __name__,
        'Meta': meta,
        'id': models.TextField(primary_key=True),
        'page_content': models.TextField(db_column='pageContent', null=True),
        'metadata': models.JSONField(default=dict, null=True),
        'source_type': models.TextField(db_column='sourceType', null=True),
        'source_name': models.TextField(db_column='sourceName', null=True),
        'hash': models.TextField(null=True),
        'embedding': VectorField(dimensions=dimensions, null=True),
        'distance_strategy': distance_strategy,
        'to_stored_document': _to_stored_document,
        '__str__': _str,
    }

    model = type(_class_name(table_name), (models.Model,), attrs)
    _document_models[table_name] = model
    return model
