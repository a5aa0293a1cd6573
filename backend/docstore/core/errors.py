"""
Custom error classes.
"""


class DocStoreError(Exception):
    """Base document store error class."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class SetupError(DocStoreError):
    """Table or extension creation rejected by the database."""


class ReadError(DocStoreError):
    """A lookup, delete or search query failed."""


class ValidationError(DocStoreError):
    """Invalid input detected before any database round-trip."""


class WriteError(DocStoreError):
    """A batch upsert was rejected by the database."""
    def __init__(self, message: str, first_content: str = None):
        self.first_content = first_content
        super().__init__(message)
