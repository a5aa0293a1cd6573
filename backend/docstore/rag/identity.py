"""
Source identity for documents.

Derives the source name, source type and a stable row id from a document.
All functions are pure and deterministic for identical input.
"""
import os
from typing import Any, Optional, Tuple

from .document import Document
from .hashing import compute_hash

UNKNOWN_SOURCE_TYPE = "unknown"

_SOURCE_NAME_KEYS = ("sourceName", "source_name", "source")
_SOURCE_TYPE_KEYS = ("sourceType", "source_type")
_LINE_RANGE_KEYS = (("startLine", "endLine"), ("start_line", "end_line"))


def _first_value(metadata: dict, keys) -> Optional[str]:
    for key in keys:
        value = metadata.get(key)
        if value is not None and value != "":
            return str(value)
    return None


def _as_line(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_source_name(document: Document) -> Optional[str]:
    """Return the logical source file of a chunk, or None if unknown."""
    if document.source_name:
        return document.source_name
    return _first_value(document.metadata, _SOURCE_NAME_KEYS)


def get_source_type(document: Document) -> str:
    """
    Return the source classification of a chunk.

    An explicit type wins; otherwise the extension of the source name is used,
    and "unknown" when neither is available.
    """
    if document.source_type:
        return document.source_type
    explicit = _first_value(document.metadata, _SOURCE_TYPE_KEYS)
    if explicit:
        return explicit

    source_name = get_source_name(document)
    if source_name:
        basename = source_name.replace("\\", "/").rstrip("/").split("/")[-1]
        extension = os.path.splitext(basename)[1]
        if extension:
            return extension[1:].lower()
    return UNKNOWN_SOURCE_TYPE


def get_line_range(document: Document) -> Optional[Tuple[int, int]]:
    """
    Return the (start, end) line range of a chunk from its metadata.

    Reads the `loc.lines.from/to` layout written by text splitters, then the
    flat `startLine`/`endLine` keys.
    """
    metadata = document.metadata
    loc = metadata.get("loc")
    if isinstance(loc, dict) and isinstance(loc.get("lines"), dict):
        lines = loc["lines"]
        start, end = _as_line(lines.get("from")), _as_line(lines.get("to"))
        if start is not None and end is not None:
            return start, end

    for start_key, end_key in _LINE_RANGE_KEYS:
        start, end = _as_line(metadata.get(start_key)), _as_line(metadata.get(end_key))
        if start is not None and end is not None:
            return start, end
    return None


def get_unique_id(document: Document) -> str:
    """
    Derive the default row id of a chunk.

    "{type}:{name}:{start}-{end}" when the chunk has a source name and a line
    range, otherwise the range is replaced by the content hash.
    """
    source_type = get_source_type(document)
    source_name = get_source_name(document)
    line_range = get_line_range(document)

    if source_name and line_range:
        start, end = line_range
        return f"{source_type}:{source_name}:{start}-{end}"
    return f"{source_type}:{source_name or '-'}:{compute_hash(document.page_content)}"
