"""
Tests for similarity search and the retriever.
"""

import unittest
from unittest.mock import MagicMock

import numpy as np

from docstore.core.errors import ValidationError
from docstore.rag.document import StoredDocument
from docstore.rag.retriever import DocumentRetriever
from docstore.rag.vectorstore.searcher import SimilaritySearcher

from fakes import InMemoryDocumentRepository


def stored(row_id, content, embedding, **metadata):
    return StoredDocument(
        id=row_id,
        page_content=content,
        metadata=metadata,
        source_type="txt",
        source_name=f"{row_id}.txt",
        hash=row_id,
        embedding=embedding,
    )


class TestSimilaritySearcher(unittest.TestCase):
    """Test nearest-neighbour queries."""

    def setUp(self):
        self.repository = InMemoryDocumentRepository()
        for row in [
            stored("east", "east", [1.0, 0.0], lang="en"),
            stored("north", "north", [0.0, 1.0], lang="de"),
            stored("northeast", "northeast", [0.7, 0.7], lang="en"),
            stored("west", "west", [-1.0, 0.0], lang="en"),
        ]:
            self.repository.rows[row.id] = row
        self.searcher = SimilaritySearcher(self.repository)

    def test_results_are_ordered_by_distance(self):
        results = self.searcher.search([1.0, 0.1], 4)

        self.assertEqual([document.id for document, _ in results], ["east", "northeast", "north", "west"])
        distances = [distance for _, distance in results]
        self.assertEqual(distances, sorted(distances))

    def test_limit(self):
        self.assertEqual(len(self.searcher.search([1.0, 0.0], 2)), 2)
        self.assertEqual(len(self.searcher.search([1.0, 0.0], 10)), 4)

    def test_filter_matches_metadata(self):
        results = self.searcher.search([0.0, 1.0], 4, filter={"lang": "en"})
        self.assertEqual({document.id for document, _ in results}, {"east", "northeast", "west"})

    def test_default_filter_applies_when_none_given(self):
        searcher = SimilaritySearcher(self.repository, default_filter={"lang": "de"})

        self.assertEqual([d.id for d, _ in searcher.search([1.0, 0.0], 4)], ["north"])
        self.assertEqual(len(searcher.search([1.0, 0.0], 4, filter={"lang": "en"})), 3)

    def test_rows_without_distance_or_content_are_dropped(self):
        repository = MagicMock()
        repository.search.return_value = [
            (stored("a", "a", None), 0.1),
            (stored("b", None, None), 0.2),
            (stored("c", "c", None), None),
        ]

        results = SimilaritySearcher(repository).search([1.0], 3)

        self.assertEqual([document.id for document, _ in results], ["a"])

    def test_array_query_vector(self):
        results = self.searcher.search(np.array([1.0, 0.1]), 1)

        self.assertEqual([document.id for document, _ in results], ["east"])
        with self.assertRaises(ValidationError):
            self.searcher.search(np.array([]), 1)

    def test_invalid_arguments(self):
        for k in [0, -1, 1.5, True, None]:
            with self.subTest(k=k):
                with self.assertRaises(ValidationError):
                    self.searcher.search([1.0, 0.0], k)
        with self.assertRaises(ValidationError):
            self.searcher.search([], 1)
        with self.assertRaises(ValidationError):
            self.searcher.search([1.0, 0.0], 1, filter=["lang"])


class TestDocumentRetriever(unittest.TestCase):
    """Test the retriever wrapper."""

    def test_retrieve_uses_fixed_k_and_filter(self):
        store = MagicMock()
        store.similarity_search.return_value = ["doc"]

        retriever = DocumentRetriever(store, k=2, filter={"lang": "en"})

        self.assertEqual(retriever.retrieve("where"), ["doc"])
        store.similarity_search.assert_called_once_with("where", 2, {"lang": "en"})

    def test_retrieve_with_scores(self):
        store = MagicMock()
        DocumentRetriever(store).retrieve_with_scores("where")
        store.similarity_search_with_score.assert_called_once_with("where", 4, None)

    def test_invalid_k(self):
        with self.assertRaises(ValidationError):
            DocumentRetriever(MagicMock(), k=0)


if __name__ == "__main__":
    unittest.main()
