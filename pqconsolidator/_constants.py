"""
Global constants for pqconsolidator.

Organized by: File Extensions, Writer Defaults, Schema Modes,
DataFrame Backend, CLI Exit Codes.
"""

from typing import Literal

# File Extensions
PARQUET_EXTENSION = ".parquet"
"""Target format extension (compared case-insensitively)."""


# Writer Defaults
DEFAULT_COMPRESSION = "snappy"
"""Codec applied uniformly to the consolidated output."""

SUPPORTED_COMPRESSIONS = frozenset(
    {"snappy", "gzip", "brotli", "zstd", "lz4", "none"}
)
"""Codecs accepted by pyarrow's ParquetWriter ('none' disables compression)."""

DEFAULT_BATCH_SIZE = 65_536
"""Maximum rows per record batch read from an input file."""


# Schema Modes
SchemaMode = Literal["positional", "strict", "unify"]
"""
Schema compatibility policy:
    - positional: same length, same name and type at every position (DEFAULT)
    - strict: positional plus equal nullability
    - unify: promote types and fill missing columns with nulls
"""

DEFAULT_SCHEMA_MODE: SchemaMode = "positional"

SCHEMA_MODES: tuple[SchemaMode, ...] = ("positional", "strict", "unify")


# DataFrame Backend Configuration
DataFrameBackend = Literal["pyarrow", "polars", "pandas"]
"""Valid DataFrame backend types."""

DEFAULT_DATAFRAME_BACKEND: DataFrameBackend = "pyarrow"
"""Default DataFrame backend used by read()."""

AVAILABLE_BACKENDS: tuple[DataFrameBackend, ...] = ("pyarrow", "polars", "pandas")
"""All supported DataFrame backends (registered or not)."""


# CLI Exit Codes
EXIT_OK = 0
EXIT_USAGE = 2
EXIT_NO_INPUTS = 3
EXIT_LOCATE = 4
EXIT_SCHEMA = 5
EXIT_IO = 6
EXIT_INTERRUPTED = 130
