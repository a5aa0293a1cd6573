"""
Document model, identity, hashing, embeddings and vector store.
"""
