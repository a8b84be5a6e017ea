"""Shared pytest fixtures for all tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from sheetschema.core.config import Settings
from sheetschema.schema.models import ColumnSchema, TableSchema

ITEMS_CSV = """#class:Item
#database:ItemDatabase
# exported from the balancing sheet
Id,Name,Max HP,Rarity
int,string,float,enum
key,name|tooltip(Shown in shop),range(0;100),Common,Rare,Epic
1,Sword,12.5,common
2,"Shield, large",40,RARE
3,Potion,,Epic
"""


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def items_csv() -> str:
    """A three-header-row table with directives, flags and an enum column."""
    return ITEMS_CSV


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write text to a file under tmp_path and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_table() -> Callable[..., TableSchema]:
    """Factory for minimal schemas whose columns reference other tables by name."""

    def _make(name: str, references: dict[str, str] | None = None) -> TableSchema:
        columns = [ColumnSchema(field_name="id", original_header="Id", is_key=True)]
        for column_name, target in (references or {}).items():
            columns.append(
                ColumnSchema(
                    field_name=column_name,
                    original_header=column_name,
                    resolved_type="int",
                    is_foreign_key=True,
                    foreign_key_table=target,
                    foreign_key_column="id",
                )
            )
        return TableSchema(class_name=name.title(), source_table_name=name, columns=columns)

    return _make
