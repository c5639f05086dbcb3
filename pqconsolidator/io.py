"""
Read consolidated Parquet files back.

read() materializes a file with the selected DataFrame backend; inspect()
reports footer-level facts without reading any data pages.
"""

from dataclasses import dataclass
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from pqconsolidator._exceptions import SchemaReadError
from pqconsolidator.dataframe import create_dataframe


@dataclass(frozen=True)
class FileInfo:
    """Footer summary of a Parquet file."""

    path: Path
    schema: pa.Schema
    num_rows: int
    num_row_groups: int
    compression: str | None
    created_by: str | None


def read(path: str | Path, backend: str | None = None):
    """
    Load a Parquet file into a DataFrame.

    Args:
        path: Parquet file
        backend: 'pyarrow', 'polars' or 'pandas'. If None, uses the
            global backend set by pqconsolidator.use()

    Returns:
        pyarrow.Table, polars.DataFrame or pandas.DataFrame

    Examples:
        >>> pqconsolidator.read("merged.parquet").num_rows
        22
        >>> pqconsolidator.read("merged.parquet", backend="polars").height
        22
    """
    from pqconsolidator import _DATAFRAME_BACKEND

    backend = backend or _DATAFRAME_BACKEND
    table = pq.read_table(path)
    return create_dataframe(backend, table)


def inspect(path: str | Path) -> FileInfo:
    """
    Summarize a Parquet file from its footer.

    Raises:
        SchemaReadError: If the footer cannot be read
    """
    try:
        metadata = pq.read_metadata(path)
    except (OSError, pa.ArrowException) as e:
        raise SchemaReadError(path, str(e)) from e

    compression = None
    if metadata.num_row_groups > 0 and metadata.num_columns > 0:
        compression = metadata.row_group(0).column(0).compression

    return FileInfo(
        path=Path(path),
        schema=metadata.schema.to_arrow_schema(),
        num_rows=metadata.num_rows,
        num_row_groups=metadata.num_row_groups,
        compression=compression,
        created_by=metadata.created_by,
    )
