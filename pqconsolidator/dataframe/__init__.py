"""
DataFrame backend registry and factory.

read() hands the consolidated PyArrow Table to create_dataframe(), which
converts it into the selected backend's native DataFrame.
"""

from typing import Any, Protocol

from pqconsolidator._constants import AVAILABLE_BACKENDS, DataFrameBackend
from pqconsolidator._exceptions import BackendError


class BackendFactory(Protocol):
    """Protocol for backend factory functions."""

    def __call__(self, arrow_table: Any) -> Any:
        """Create backend DataFrame from PyArrow Table."""
        ...


# Backend registry: name -> factory function
_BACKENDS: dict[DataFrameBackend, BackendFactory] = {}


def register_backend(name: DataFrameBackend, factory_fn: BackendFactory) -> None:
    """
    Register a DataFrame backend.

    Example:
        from .polars import to_polars
        register_backend('polars', to_polars)
    """
    _BACKENDS[name] = factory_fn


def create_dataframe(backend: str, arrow_table: Any):
    """
    Convert a PyArrow Table into the requested backend's DataFrame.

    Raises:
        BackendError: If backend is unknown or not registered
    """
    if backend not in AVAILABLE_BACKENDS:
        raise BackendError(
            f"Unknown backend: '{backend}'\n"
            f"Available backends: {AVAILABLE_BACKENDS}\n"
            f"\n"
            f"To use additional backends, install required packages:\n"
            f"  pip install polars  # For Polars backend\n"
            f"  pip install pandas  # For Pandas backend"
        )

    if backend not in _BACKENDS:
        raise BackendError(
            f"Backend '{backend}' is not registered.\n"
            f"Registered backends: {list(_BACKENDS.keys())}\n"
            f"\n"
            f"The backend may require additional dependencies:\n"
            f"  pip install {backend}"
        )

    factory = _BACKENDS[backend]  # type: ignore[index]
    return factory(arrow_table)


def get_available_backends() -> list[DataFrameBackend]:
    """List of currently registered backends."""
    return list(_BACKENDS.keys())


def _register_all_backends() -> None:
    """Register all available backends on module import."""
    from pqconsolidator.dataframe.pyarrow import to_pyarrow

    register_backend("pyarrow", to_pyarrow)

    # Optional backends register only when their package imports
    from pqconsolidator.dataframe.polars import HAS_POLARS, to_polars

    if HAS_POLARS:
        register_backend("polars", to_polars)

    from pqconsolidator.dataframe.pandas import HAS_PANDAS, to_pandas

    if HAS_PANDAS:
        register_backend("pandas", to_pandas)


_register_all_backends()

__all__ = [
    "create_dataframe",
    "get_available_backends",
    "register_backend",
]
