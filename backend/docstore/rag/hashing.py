"""
Content fingerprints used for change detection.
"""
import hashlib


def compute_hash(content: str) -> str:
    """
    Compute the SHA-1 hex digest of a chunk's content.

    Args:
        content: Chunk text

    Returns:
        40-character hex string
    """
    return hashlib.sha1((content or "").encode("utf-8")).hexdigest()
