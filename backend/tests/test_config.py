"""
Tests for configuration and database registration.
"""

import unittest
from unittest.mock import patch

from docstore.core import config
from docstore.core.config import VectorStoreConfig, connection_options_from_env
from docstore.core.errors import DocStoreError, ValidationError, WriteError
from docstore.db.session import build_database_settings, database_alias, register_database


class TestVectorStoreConfig(unittest.TestCase):
    """Test store configuration defaults and validation."""

    def test_defaults_come_from_environment(self):
        with patch.object(config, "DOCSTORE_TABLE_NAME", "chunks"), \
                patch.object(config, "DOCSTORE_UPSERT_BATCH_SIZE", 250), \
                patch.object(config, "DOCSTORE_VERBOSE", True):
            store_config = VectorStoreConfig(connection_options={"database": "db"})

        self.assertEqual(store_config.table_name, "chunks")
        self.assertEqual(store_config.batch_size, 250)
        self.assertTrue(store_config.verbose)

    def test_explicit_values_win(self):
        store_config = VectorStoreConfig(
            connection_options={"database": "db"},
            table_name="docs",
            verbose=False,
            batch_size=10,
            distance_strategy="l2",
            dimensions=3,
        )
        self.assertEqual(store_config.table_name, "docs")
        self.assertFalse(store_config.verbose)
        self.assertEqual(store_config.batch_size, 10)
        self.assertEqual(store_config.distance_strategy, "l2")

    def test_invalid_values(self):
        cases = [
            {"connection_options": None},
            {"connection_options": {}},
            {"connection_options": {"database": "db"}, "table_name": ""},
            {"connection_options": {"database": "db"}, "batch_size": 0},
            {"connection_options": {"database": "db"}, "distance_strategy": "manhattan"},
            {"connection_options": {"database": "db"}, "filter": "lang=en"},
            {"connection_options": {"database": "db"}, "dimensions": 0},
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValidationError):
                    VectorStoreConfig(**kwargs)

    def test_connection_options_from_env(self):
        options = connection_options_from_env()
        self.assertEqual(set(options), {"host", "port", "user", "password", "database"})


class TestErrors(unittest.TestCase):
    """Test the error hierarchy."""

    def test_errors_share_a_base(self):
        error = WriteError("Error inserting: hello", first_content="hello")
        self.assertIsInstance(error, DocStoreError)
        self.assertEqual(error.message, "Error inserting: hello")
        self.assertEqual(error.first_content, "hello")


class TestDatabaseSettings(unittest.TestCase):
    """Test translation of connection options to Django settings."""

    def test_typeorm_style_options(self):
        settings = build_database_settings({
            "type": "postgres",
            "host": "db.internal",
            "port": 5433,
            "username": "app",
            "password": "secret",
            "database": "vectors",
            "sslmode": "require",
        })

        self.assertEqual(settings["ENGINE"], "django.db.backends.postgresql")
        self.assertEqual(settings["NAME"], "vectors")
        self.assertEqual(settings["USER"], "app")
        self.assertEqual(settings["PASSWORD"], "secret")
        self.assertEqual(settings["HOST"], "db.internal")
        self.assertEqual(settings["PORT"], "5433")
        self.assertEqual(settings["OPTIONS"], {"sslmode": "require"})

    def test_driver_options_are_merged(self):
        settings = build_database_settings({
            "dbname": "vectors",
            "options": {"connect_timeout": 5},
            "application_name": "docstore",
        })
        self.assertEqual(settings["OPTIONS"], {"connect_timeout": 5, "application_name": "docstore"})
        self.assertEqual(settings["HOST"], "")
        self.assertEqual(settings["PORT"], "")

    def test_missing_database_name(self):
        for options in [{}, None, {"host": "localhost"}, {"database": ""}]:
            with self.subTest(options=options):
                with self.assertRaises(ValidationError):
                    build_database_settings(options)

    def test_alias_is_deterministic(self):
        first = build_database_settings({"database": "a", "host": "h"})
        second = build_database_settings({"host": "h", "database": "a"})
        other = build_database_settings({"database": "b", "host": "h"})

        self.assertEqual(database_alias(first), database_alias(second))
        self.assertNotEqual(database_alias(first), database_alias(other))
        self.assertTrue(database_alias(first).startswith("docstore_"))

    @patch("docstore.db.session.connections")
    def test_register_database(self, mock_connections):
        mock_connections.settings = {}

        alias = register_database({"database": "vectors", "host": "h"})
        again = register_database({"database": "vectors", "host": "h"})

        self.assertEqual(alias, again)
        self.assertEqual(list(mock_connections.settings), [alias])
        self.assertEqual(mock_connections.settings[alias]["NAME"], "vectors")


if __name__ == "__main__":
    unittest.main()
