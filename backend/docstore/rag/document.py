"""
Document value types.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Document:
    """A chunk of text submitted for indexing."""
    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None  # overrides the derived id
    hash: Optional[str] = None  # pre-computed content hash
    source_name: Optional[str] = None
    source_type: Optional[str] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


@dataclass
class StoredDocument:
    """Represents one row of the document table."""
    id: str
    page_content: str
    metadata: Dict[str, Any]
    source_type: Optional[str]
    source_name: Optional[str]
    hash: str
    embedding: Optional[List[float]] = None

    @property
    def has_source(self) -> bool:
        """Rows without both source fields are exempt from reconciliation deletes."""
        return bool(self.source_name) and bool(self.source_type)

    @property
    def source_key(self):
        return (self.source_name, self.source_type)
