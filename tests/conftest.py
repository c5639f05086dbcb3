"""Pytest fixtures for pqconsolidator tests."""

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

STANDARD_SCHEMA = pa.schema(
    [
        pa.field("id", pa.int32(), nullable=False),
        pa.field("name", pa.string(), nullable=False),
        pa.field("value", pa.float64(), nullable=False),
    ]
)

EXTRA_SCHEMA = STANDARD_SCHEMA.append(pa.field("extra", pa.string(), nullable=True))


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests (no parquet fixtures)")
    config.addinivalue_line("markers", "integration: end-to-end tests with generated files")
    config.addinivalue_line("markers", "polars: requires polars package")
    config.addinivalue_line("markers", "pandas: requires pandas package")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def standard_table(start: int, end: int, extra: bool = False) -> pa.Table:
    """Rows id=start..end-1 with name_<id> and value id*1.5."""
    ids = list(range(start, end))
    columns = [
        pa.array(ids, type=pa.int32()),
        pa.array([f"name_{i}" for i in ids], type=pa.string()),
        pa.array([i * 1.5 for i in ids], type=pa.float64()),
    ]
    if extra:
        columns.append(pa.array([f"extra_{i}" for i in ids], type=pa.string()))
        return pa.Table.from_arrays(columns, schema=EXTRA_SCHEMA)
    return pa.Table.from_arrays(columns, schema=STANDARD_SCHEMA)


def write_parquet(
    path: Path,
    start: int,
    end: int,
    extra: bool = False,
    row_group_size: int | None = None,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(standard_table(start, end, extra), path, row_group_size=row_group_size)
    return path


@pytest.fixture
def make_parquet():
    """Factory: make_parquet(path, start, end, extra=False, row_group_size=None)."""
    return write_parquet


@pytest.fixture
def data_tree(tmp_path) -> Path:
    """
    Directory with 3 root files, 2 nested files and non-parquet noise.

        test_data/file1..3.parquet     (100 rows each)
        test_data/nested/file4..5.parquet
        test_data/readme.txt
        test_data/nested/data.csv
    """
    base = tmp_path / "test_data"
    write_parquet(base / "file1.parquet", 0, 100)
    write_parquet(base / "file2.parquet", 100, 200)
    write_parquet(base / "file3.parquet", 200, 300)
    write_parquet(base / "nested" / "file4.parquet", 300, 400)
    write_parquet(base / "nested" / "file5.parquet", 400, 500)
    (base / "readme.txt").write_text("This is not a parquet file")
    (base / "nested" / "data.csv").write_text("id,name,value\n1,test,1.0")
    return base


@pytest.fixture(params=["pyarrow", "polars", "pandas"])
def all_backends(request):
    backend = request.param
    if backend == "polars":
        pytest.importorskip("polars")
    elif backend == "pandas":
        pytest.importorskip("pandas")
    return backend


@pytest.fixture(autouse=True)
def reset_pqconsolidator():
    yield
    import pqconsolidator
    pqconsolidator.use("pyarrow")


@pytest.fixture
def standard_schema() -> pa.Schema:
    return STANDARD_SCHEMA


@pytest.fixture
def make_table():
    """Factory: make_table(start, end, extra=False) -> pa.Table."""
    return standard_table
