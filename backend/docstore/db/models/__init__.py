"""
Database models.
"""
from .document import get_document_model, VECTOR_OPCLASSES

__all__ = ['get_document_model', 'VECTOR_OPCLASSES']
