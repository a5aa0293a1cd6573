#!/usr/bin/env python
"""
Seed demo data script.

Indexes two small files into the configured document table and runs a query.
Uses OpenAI embeddings when OPENAI_API_KEY is set, mock embeddings otherwise.
"""
import os
import sys

sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'backend'))

from docstore.core.config import OPENAI_API_KEY, connection_options_from_env
from docstore.rag.document import Document
from docstore.rag.embeddings import MockEmbeddingsClient, OpenAIEmbeddingsClient
from docstore.rag.vectorstore import PgVectorStore


def seed_demo_data(query: str = "hello"):
    embeddings = OpenAIEmbeddingsClient() if OPENAI_API_KEY else MockEmbeddingsClient()
    store = PgVectorStore.from_documents(
        [
            Document("hello", metadata={"source": "hello.txt", "loc": {"lines": {"from": 1, "to": 1}}}),
            Document("hi", metadata={"source": "hi.txt", "loc": {"lines": {"from": 1, "to": 1}}}),
        ],
        embeddings,
        connection_options_from_env(),
        init_table=True,
    )

    for document, distance in store.similarity_search_with_score(query, 2):
        print(f"{distance:.4f}  {document.id}  {document.page_content!r}")


if __name__ == '__main__':
    print("Seeding demo data...")
    seed_demo_data(sys.argv[1] if len(sys.argv) > 1 else "hello")
    print("Demo data seeded successfully!")
