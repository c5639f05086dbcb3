import importlib.metadata as _metadata
import logging

from pqconsolidator._constants import DEFAULT_DATAFRAME_BACKEND, DataFrameBackend
from pqconsolidator._exceptions import (
    BackendError,
    BatchReadError,
    BatchWriteError,
    ConsolidateError,
    ConsolidatorError,
    EmptyInputSetError,
    FinalizeError,
    LocateError,
    NotTargetFormatError,
    OutputCreateError,
    PathNotFoundError,
    SchemaMismatchError,
    SchemaReadError,
)
from pqconsolidator._format import is_parquet_file
from pqconsolidator._logging import disable_logging, setup_basic_logging
from pqconsolidator.consolidate import ConsolidationRun, RunState, consolidate, validate
from pqconsolidator.io import FileInfo, inspect, read
from pqconsolidator.locate import locate
from pqconsolidator.options import ConsolidateOptions
from pqconsolidator.schema import CanonicalSchema, FieldMismatch

__version__ = _metadata.version("pqconsolidator")

# Global DataFrame backend used by read()
_DATAFRAME_BACKEND: DataFrameBackend = DEFAULT_DATAFRAME_BACKEND


def use(backend: str):
    """
    Set the global DataFrame backend for all future read() calls.

    Available backends:
        - 'pyarrow': Default, no extra dependencies
        - 'polars': Requires polars package
        - 'pandas': Requires pandas package

    Raises:
        BackendError: If backend is unknown or not installed

    Warning:
        Modifies a module-level variable; not thread-safe. Pass backend=
        to read() explicitly when reading from worker threads.

    Examples:
        >>> import pqconsolidator
        >>> pqconsolidator.use('polars')
        >>> df = pqconsolidator.read('merged.parquet')  # polars.DataFrame
    """
    global _DATAFRAME_BACKEND

    from pqconsolidator.dataframe import get_available_backends

    available = get_available_backends()

    if backend not in available:
        raise BackendError(
            f"Unknown backend: '{backend}'\n"
            f"Available backends: {available}\n"
            f"\n"
            f"To use additional backends, install required packages:\n"
            f"  pip install polars  # For Polars backend\n"
            f"  pip install pandas  # For Pandas backend"
        )

    _DATAFRAME_BACKEND = backend  # type: ignore[assignment]


def get_backend() -> DataFrameBackend:
    """
    Get the current global DataFrame backend.

    Example:
        >>> pqconsolidator.get_backend()
        'pyarrow'
    """
    return _DATAFRAME_BACKEND


def verbose(level=True):
    """
    Enable/disable verbose logging for pqconsolidator operations.

    Args:
        level: Logging level to enable:
            - True or "info": Show INFO and above (default)
            - "debug": Show DEBUG and above (per file, per phase)
            - False: Disable all logging

    Example:
        >>> import pqconsolidator
        >>> pqconsolidator.verbose("debug")
    """
    if level is False:
        disable_logging()
    elif level is True or level == "info":
        setup_basic_logging(level=logging.INFO)
    elif level == "debug":
        setup_basic_logging(level=logging.DEBUG)
    else:
        raise ValueError(
            f"Invalid verbose level: {level}. " "Use True, 'info', 'debug', or False."
        )


__all__ = [
    "BackendError",
    "BatchReadError",
    "BatchWriteError",
    "CanonicalSchema",
    "ConsolidateError",
    "ConsolidateOptions",
    "ConsolidationRun",
    "ConsolidatorError",
    "EmptyInputSetError",
    "FieldMismatch",
    "FileInfo",
    "FinalizeError",
    "LocateError",
    "NotTargetFormatError",
    "OutputCreateError",
    "PathNotFoundError",
    "RunState",
    "SchemaMismatchError",
    "SchemaReadError",
    "consolidate",
    "get_backend",
    "inspect",
    "is_parquet_file",
    "locate",
    "read",
    "use",
    "validate",
    "verbose",
]
