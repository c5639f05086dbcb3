"""PyArrow backend (default, no extra dependencies)."""

import pyarrow as pa


def to_pyarrow(arrow_table: pa.Table) -> pa.Table:
    return arrow_table
