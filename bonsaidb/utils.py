"""Small text helpers."""

from __future__ import annotations


def split(text: str, delim: str) -> list[str]:
    """Split ``text`` on ``delim``, dropping empty pieces."""
    if len(delim) != 1:
        raise ValueError("delimiter must be a single character")
    return [piece for piece in text.split(delim) if piece]