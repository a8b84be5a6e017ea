"""Tests for cross-table reference lookup."""

from sheetschema.analysis.relationships import CrossReferenceResolver


class TestRegisterTable:
    """Tests for registering materialized rows."""

    def test_handles_keyed_by_key_column(self):
        """Test lookup by the key column value."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        warnings = resolver.register_table(
            "items", "id", ["sword", "shield"], [{"id": "1"}, {"id": "2"}]
        )

        assert warnings == []
        assert resolver.resolve("items", "2") == ("shield", None)

    def test_row_index_used_without_key_column(self):
        """Test that rows missing the key column are keyed by index."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        resolver.register_table("items", "id", ["sword", "shield"], [{}, {}])

        assert resolver.resolve("items", "0") == ("sword", None)
        assert resolver.resolve("items", "1") == ("shield", None)

    def test_first_duplicate_wins(self):
        """Test that a repeated key keeps the first handle and warns."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        warnings = resolver.register_table(
            "items", "id", ["first", "second"], [{"id": "7"}, {"id": "7"}]
        )

        assert resolver.resolve("items", "7") == ("first", None)
        assert len(warnings) == 1
        assert warnings[0].row == 1
        assert "Duplicate key '7'" in warnings[0].message

    def test_empty_keys_are_not_registered(self):
        """Test that rows with a blank key cannot be referenced."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        resolver.register_table("items", "id", ["a", "b"], [{"id": ""}, {"id": "1"}])

        handle, warning = resolver.resolve("items", "0")
        assert handle is None
        assert warning is not None

    def test_length_mismatch_warns(self):
        """Test registering fewer handles than rows."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        warnings = resolver.register_table("items", "id", ["a"], [{"id": "1"}, {"id": "2"}])

        assert len(warnings) == 1
        assert resolver.resolve("items", "1") == ("a", None)


class TestResolve:
    """Tests for foreign key lookup."""

    def test_null_and_empty_are_silent(self):
        """Test that intentional absence resolves without a warning."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        resolver.register_table("items", "id", ["a"], [{"id": "1"}])

        assert resolver.resolve("items", "") == (None, None)
        assert resolver.resolve("items", "null") == (None, None)
        assert resolver.resolve("unknown", "") == (None, None)

    def test_unregistered_table_warns(self):
        """Test lookups against a table processed out of order."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        handle, warning = resolver.resolve("vendors", "3")

        assert handle is None
        assert warning is not None
        assert "has not been registered yet" in warning.message

    def test_missing_key_warns(self):
        """Test a key that is not in the registered table."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        resolver.register_table("items", "id", ["a"], [{"id": "1"}])

        handle, warning = resolver.resolve("items", "99")

        assert handle is None
        assert warning is not None
        assert "'99' not found in table 'items'" in warning.message

    def test_clear(self):
        """Test that clear forgets every table."""
        resolver: CrossReferenceResolver[str] = CrossReferenceResolver()
        resolver.register_table("items", "id", ["a"], [{"id": "1"}])
        assert resolver.is_registered("items")

        resolver.clear()

        assert not resolver.is_registered("items")
