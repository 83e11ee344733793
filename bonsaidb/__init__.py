"""Page-based record store with an on-disk B+ tree index, a shell and a CSV sample generator."""

__version__ = "1.0.0"