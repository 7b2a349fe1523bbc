"""Pytest configuration and shared fixtures."""

from pathlib import Path
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

from promptmap.cube import Cell, ColumnInfo, DataTable
from promptmap.mapping import FieldCatalog, MemoryKeyValueStore, SQLiteKeyValueStore
from promptmap.validation import ExpressionEvaluator


def make_row(*values) -> list[Cell]:
    """Build a table row: strings become text cells, numbers numeric cells."""
    row = []
    for value in values:
        if isinstance(value, (int, float)):
            row.append(Cell(text=str(value), num=float(value)))
        else:
            row.append(Cell(text=value))
    return row


@pytest.fixture
def sample_table() -> DataTable:
    """Table with Region and Customer dimensions and a Sales measure."""
    return DataTable(
        dimensions=[
            ColumnInfo(title="Region", expression="[Region]"),
            ColumnInfo(title="Customer", expression="[Customer]"),
        ],
        measures=[ColumnInfo(title="Sales", expression="Sum(Sales)")],
        rows=[
            make_row("East", "Acme", 100),
            make_row("East", "Beta", 250.5),
            make_row("West", "Acme", 75),
        ],
    )


@pytest.fixture
def single_customer_table() -> DataTable:
    """Table in which exactly one customer is selected."""
    return DataTable(
        dimensions=[ColumnInfo(title="Customer")],
        measures=[ColumnInfo(title="Sales")],
        rows=[make_row("Acme", 100), make_row("Acme", 40)],
    )


@pytest.fixture
def sample_catalog(sample_table: DataTable) -> FieldCatalog:
    """Catalog derived from the sample table."""
    return FieldCatalog.from_table(sample_table)


@pytest.fixture
def mock_evaluator() -> Mock:
    """Create a mocked expression evaluator."""
    evaluator = Mock(spec=ExpressionEvaluator)
    evaluator.evaluate = AsyncMock()
    return evaluator


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """Create an in-process key-value store."""
    return MemoryKeyValueStore()


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> AsyncGenerator[SQLiteKeyValueStore, None]:
    """Create a SQLite key-value store in a temporary directory."""
    store = SQLiteKeyValueStore(tmp_path / "test_sessions.db")
    await store.initialize()
    yield store
    await store.close()
