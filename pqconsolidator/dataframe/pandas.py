"""
Pandas backend.

Requires pandas package: pip install pandas
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pqconsolidator._exceptions import BackendError

if TYPE_CHECKING:
    import pandas as pd
    import pyarrow as pa

try:
    import pandas as pd  # noqa: F401

    HAS_PANDAS = True
except ImportError:
    HAS_PANDAS = False


def to_pandas(arrow_table: pa.Table) -> pd.DataFrame:
    """Convert PyArrow Table to Pandas. Called by factory when backend='pandas'."""
    if not HAS_PANDAS:
        raise BackendError(
            "Pandas backend requires pandas package.\n"
            "Install with: pip install pandas"
        )
    return arrow_table.to_pandas()
