"""
docstore: a reconciling document store on PostgreSQL + pgvector.
"""

__version__ = "0.1.0"
