"""
Table lifecycle for document tables.
"""
from django.db import Error, connections

from docstore.core.errors import SetupError
from docstore.core.logging import get_logger

logger = get_logger(__name__)


def _table_exists(connection, table_name: str) -> bool:
    with connection.cursor() as cursor:
        return table_name in connection.introspection.table_names(cursor)


def _extension_exists(connection) -> bool:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1 FROM pg_extension WHERE extname = 'vector'")
        return cursor.fetchone() is not None


def _exists_after_failure(check, *args) -> bool:
    """Re-run an existence check after failed DDL; a failing check counts as absent."""
    try:
        return check(*args)
    except Error:
        return False


def ensure_table(model, using: str) -> bool:
    """
    Create the vector extension and the model's table if absent.

    Safe to call repeatedly and from concurrent processes: when the extension
    or table DDL fails because another caller created it first, the failure
    is ignored.

    Args:
        model: Document model from get_document_model
        using: Database alias

    Returns:
        True if this call created the table
    """
    connection = connections[using]
    table_name = model._meta.db_table

    try:
        with connection.cursor() as cursor:
            cursor.execute("CREATE EXTENSION IF NOT EXISTS vector")
    except Error as e:
        if not _exists_after_failure(_extension_exists, connection):
            raise SetupError(f"Could not enable the vector extension: {e}") from e
        logger.debug("Vector extension was created concurrently")

    try:
        if _table_exists(connection, table_name):
            return False
        with connection.schema_editor() as editor:
            editor.create_model(model)
    except Error as e:
        if _exists_after_failure(_table_exists, connection, table_name):
            logger.debug(f"Table {table_name} was created concurrently")
            return False
        raise SetupError(f"Could not create table {table_name}: {e}") from e

    logger.info(f"Created document table {table_name}")
    return True
