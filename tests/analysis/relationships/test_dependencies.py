"""Tests for dependency ordering of table batches.

Tests topological ordering, cycle reporting and the downgrade of foreign
keys that point outside the batch.
"""

import itertools

import pytest

from sheetschema.analysis.relationships import resolve_dependencies
from sheetschema.core.models.base import ResolvedType


class TestOrdering:
    """Tests for creation order."""

    def test_empty_batch(self):
        """Test that no tables is a successful empty order."""
        result = resolve_dependencies([])

        assert result.success
        assert result.ordered_schemas == []

    def test_independent_tables_keep_input_order(self, make_table):
        """Test that unrelated tables are not reordered."""
        result = resolve_dependencies([make_table("b"), make_table("a"), make_table("c")])

        assert result.table_names == ["b", "a", "c"]

    @pytest.mark.parametrize("order", list(itertools.permutations(["a", "b", "c"])))
    def test_chain_in_any_input_order(self, make_table, order):
        """Test that c -> b -> a is always created as a, b, c."""
        tables = {
            "a": make_table("a"),
            "b": make_table("b", {"aId": "a"}),
            "c": make_table("c", {"bId": "b"}),
        }
        result = resolve_dependencies([tables[name] for name in order])

        assert result.success
        assert result.table_names == ["a", "b", "c"]

    def test_diamond(self, make_table):
        """Test a table with two parents that share a parent."""
        schemas = [
            make_table("loot", {"itemId": "item", "zoneId": "zone"}),
            make_table("item", {"worldId": "world"}),
            make_table("zone", {"worldId": "world"}),
            make_table("world"),
        ]
        names = resolve_dependencies(schemas).table_names

        assert names.index("world") < names.index("item") < names.index("loot")
        assert names.index("zone") < names.index("loot")

    def test_repeated_reference_counts_once(self, make_table):
        """Test two columns referencing the same table."""
        schemas = [make_table("pair", {"leftId": "unit", "rightId": "unit"}), make_table("unit")]

        assert resolve_dependencies(schemas).table_names == ["unit", "pair"]


class TestCycles:
    """Tests for cycle detection."""

    def test_two_table_cycle(self, make_table):
        """Test that a cycle fails the batch and names both tables."""
        result = resolve_dependencies(
            [make_table("a", {"bId": "b"}), make_table("b", {"aId": "a"})]
        )

        assert not result.success
        assert result.ordered_schemas == []
        message = result.error_message or ""
        assert message.startswith("Circular dependency detected: ")
        assert "a → b → a" in message or "b → a → b" in message
        assert "Break the cycle" in message

    def test_self_reference_is_a_cycle(self, make_table):
        """Test a table that references itself."""
        result = resolve_dependencies([make_table("node", {"parentId": "node"})])

        assert not result.success
        assert "node → node" in (result.error_message or "")

    def test_cycle_path_excludes_tables_hanging_off_it(self, make_table):
        """Test that only the tables on the cycle are named."""
        schemas = [
            make_table("root"),
            make_table("x", {"yId": "y", "rootId": "root"}),
            make_table("y", {"xId": "x"}),
            make_table("leaf", {"xId": "x"}),
        ]
        message = resolve_dependencies(schemas).error_message or ""

        assert "x → y → x" in message
        assert "leaf" not in message
        assert "root" not in message


class TestDanglingForeignKeys:
    """Tests for references to tables outside the batch."""

    def test_dangling_reference_is_downgraded(self, make_table):
        """Test that the column becomes a plain int with a warning."""
        result = resolve_dependencies([make_table("item", {"vendorId": "vendor"})])

        assert result.success
        column = result.ordered_schemas[0].get_column("vendorId")
        assert column is not None
        assert not column.is_foreign_key
        assert column.foreign_key_table is None
        assert column.resolved_type == ResolvedType.INT

        assert len(result.warnings) == 1
        assert "'vendor' which is not part of this import" in result.warnings[0].message
        assert result.warnings[0].table == "item"

    def test_input_is_not_mutated(self, make_table):
        """Test that the caller's schema keeps its foreign key."""
        original = make_table("item", {"vendorId": "vendor"})

        resolve_dependencies([original])

        column = original.get_column("vendorId")
        assert column is not None
        assert column.is_foreign_key
        assert column.foreign_key_table == "vendor"

    def test_demoted_copy_shares_nothing_with_input(self, make_table):
        """Test that editing a demoted table leaves the caller's schema alone."""
        original = make_table("item", {"vendorId": "vendor"})
        original = original.model_copy(update={"rows": [{"id": "1", "vendorId": "42"}]})
        original.columns[0].attributes["range"] = "1-10"

        result = resolve_dependencies([original])
        demoted = result.ordered_schemas[0]
        demoted.rows[0]["id"] = "2"
        demoted.rows.append({"id": "3", "vendorId": ""})
        demoted.columns[0].attributes["range"] = "0-5"
        demoted.columns.pop()

        assert demoted is not original
        assert original.rows == [{"id": "1", "vendorId": "42"}]
        assert original.columns[0].attributes == {"range": "1-10"}
        assert [c.field_name for c in original.columns] == ["id", "vendorId"]

    def test_dangling_reference_does_not_block_ordering(self, make_table):
        """Test a mix of resolved and dangling references."""
        schemas = [make_table("item", {"vendorId": "vendor", "typeId": "type"}), make_table("type")]
        result = resolve_dependencies(schemas)

        assert result.table_names == ["type", "item"]
        assert result.ordered_schemas[1].get_column("typeId").is_foreign_key

    def test_duplicate_table_names_warn(self, make_table):
        """Test that a repeated table name is reported."""
        result = resolve_dependencies([make_table("a"), make_table("a")])

        assert result.success
        assert len(result.table_names) == 2
        assert any("more than once" in w.message for w in result.warnings)
