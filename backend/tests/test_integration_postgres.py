"""
End-to-end test against a real PostgreSQL server with pgvector.

Runs only when DOCSTORE_TEST_DB_HOST is set, e.g. against the compose database:

    DOCSTORE_TEST_DB_HOST=localhost pytest backend/tests/test_integration_postgres.py
"""

import os
import unittest
import uuid

from docstore.core.config import VectorStoreConfig
from docstore.rag.document import Document
from docstore.rag.embeddings.mock_client import MockEmbeddingsClient
from docstore.rag.vectorstore.pgvector_store import PgVectorStore

DB_HOST = os.getenv("DOCSTORE_TEST_DB_HOST")


@unittest.skipUnless(DB_HOST, "DOCSTORE_TEST_DB_HOST is not set")
class TestPostgresRoundTrip(unittest.TestCase):
    """Index, reconcile and search on a throwaway table."""

    def setUp(self):
        connection_options = {
            "host": DB_HOST,
            "port": os.getenv("DOCSTORE_TEST_DB_PORT", "5432"),
            "user": os.getenv("DOCSTORE_TEST_DB_USER", "postgres"),
            "password": os.getenv("DOCSTORE_TEST_DB_PASSWORD", "postgres"),
            "database": os.getenv("DOCSTORE_TEST_DB_NAME", "postgres"),
        }
        config = VectorStoreConfig(
            connection_options=connection_options,
            table_name=f"docstore_test_{uuid.uuid4().hex[:8]}",
            verbose=False,
        )
        self.store = PgVectorStore(MockEmbeddingsClient(dimensions=8), config)
        self.assertTrue(self.store.init_table())

    def tearDown(self):
        from docstore.db.session import get_db_connection

        with get_db_connection(self.store.using).schema_editor() as editor:
            editor.delete_model(self.store.document_model)

    def test_hello_hi(self):
        self.store.add_documents([
            Document("hello", metadata={"source": "hello.txt", "loc": {"lines": {"from": 1, "to": 1}}}),
            Document("hi", metadata={"source": "hi.txt", "loc": {"lines": {"from": 1, "to": 1}}}),
        ])

        results = self.store.similarity_search("hello", 1)

        self.assertEqual([document.page_content for document in results], ["hello"])
        self.assertEqual(results[0].id, "txt:hello.txt:1-1")
        self.assertFalse(self.store.init_table())

    def test_reconcile_and_filter(self):
        first = [
            Document("hello world", metadata={"source": "hello.txt", "startLine": 1, "endLine": 1, "lang": "en"}),
            Document("hallo welt", metadata={"source": "hello.txt", "startLine": 2, "endLine": 2, "lang": "de"}),
        ]
        self.assertEqual(self.store.add_documents(first).created, 2)
        self.assertEqual(self.store.add_documents(first).skipped, 2)

        summary = self.store.add_documents([first[0]])

        self.assertEqual(summary.deleted, 1)
        self.assertEqual(self.store.similarity_search("hallo welt", 4, filter={"lang": "de"}), [])
        self.assertEqual(self.store.delete_by_source("hello.txt", "txt"), 1)


if __name__ == "__main__":
    unittest.main()
