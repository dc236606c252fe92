"""Deterministic content digests."""

from __future__ import annotations

import hashlib


def digest(text: str) -> str:
    """Return lowercase hex SHA-256 over the UTF-8 bytes of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()
