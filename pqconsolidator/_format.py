"""
Format detection utilities.

Low-level utilities with no pqconsolidator dependencies (avoids circular imports).
Pure string operations - no I/O, no side effects.
"""

from pathlib import Path

from pqconsolidator._constants import PARQUET_EXTENSION


def is_parquet_file(path: str | Path) -> bool:
    """Check if path has a .parquet extension (case-insensitive)"""
    return Path(path).suffix.lower() == PARQUET_EXTENSION


def same_file(a: str | Path, b: str | Path) -> bool:
    """Check if two paths resolve to the same location"""
    return Path(a).resolve() == Path(b).resolve()
