"""
Polars backend.

Requires polars package: pip install polars
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pqconsolidator._exceptions import BackendError

if TYPE_CHECKING:
    import polars as pl
    import pyarrow as pa

try:
    import polars as pl

    HAS_POLARS = True
except ImportError:
    HAS_POLARS = False


def to_polars(arrow_table: pa.Table) -> pl.DataFrame:
    """Convert PyArrow Table to Polars. Called by factory when backend='polars'."""
    if not HAS_POLARS:
        raise BackendError(
            "Polars backend requires polars package.\n"
            "Install with: pip install polars"
        )
    return pl.from_arrow(arrow_table)
