"""Stable dedup identifiers for chat turns."""

import hashlib


def fingerprint(text: str, timestamp: str) -> str:
    """Return a 64-bit hex identifier for a turn's text and timestamp."""
    return hashlib.md5((text + timestamp).encode("utf-8")).hexdigest()[:16]
