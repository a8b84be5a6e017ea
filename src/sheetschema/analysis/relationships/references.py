"""Cross-table reference lookup for materialized rows.

After the materialization tier creates the objects for a table (in the
order given by resolve_dependencies), it registers them here. Later tables
then look up their foreign key values to get the referenced objects.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Generic, TypeVar

from sheetschema.core.models.base import ValidationWarning, WarningLevel

NULL_KEY = "null"

H = TypeVar("H")


class CrossReferenceResolver(Generic[H]):
    """Per-table maps from primary key value to materialized handle.

    Registration is sequential and happens before any lookup against the
    same table. Call clear() once per import session.
    """

    def __init__(self) -> None:
        self._lookups: dict[str, dict[str, H]] = {}

    def register_table(
        self,
        table_name: str,
        key_column_name: str,
        handles: Sequence[H],
        rows: Sequence[dict[str, str]],
    ) -> list[ValidationWarning]:
        """Register the handles created for a table.

        handles[i] is keyed by rows[i][key_column_name], or by the row index
        when the row has no such column. The first handle for a key wins;
        later duplicates are dropped with a warning. Rows with an empty key
        are not registered.

        Returns:
            Warnings for dropped duplicates and mismatched lengths
        """
        warnings: list[ValidationWarning] = []
        lookup: dict[str, H] = {}

        if len(handles) != len(rows):
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message=(
                        f"Registered {len(handles)} handles for {len(rows)} rows; "
                        f"only the first {min(len(handles), len(rows))} are used"
                    ),
                    table=table_name,
                )
            )

        for index, (handle, row) in enumerate(zip(handles, rows, strict=False)):
            key = row[key_column_name] if key_column_name in row else str(index)
            if not key:
                continue
            if key in lookup:
                warnings.append(
                    ValidationWarning(
                        level=WarningLevel.WARNING,
                        message=f"Duplicate key '{key}'; keeping the first row with this key",
                        table=table_name,
                        column=key_column_name,
                        row=index,
                    )
                )
                continue
            lookup[key] = handle

        self._lookups[table_name] = lookup
        return warnings

    def resolve(self, target_table: str, key_value: str) -> tuple[H | None, ValidationWarning | None]:
        """Look up the handle referenced by a foreign key value.

        An empty value or the literal 'null' is an intentional absence and
        resolves to (None, None). An unregistered table or unknown key
        resolves to None with a warning.
        """
        if not key_value or key_value == NULL_KEY:
            return None, None

        lookup = self._lookups.get(target_table)
        if lookup is None:
            return None, ValidationWarning(
                level=WarningLevel.WARNING,
                message=(
                    f"Referenced table '{target_table}' has not been registered yet. "
                    f"Ensure tables are processed in dependency order."
                ),
                table=target_table,
            )

        if key_value not in lookup:
            return None, ValidationWarning(
                level=WarningLevel.WARNING,
                message=(
                    f"Foreign key value '{key_value}' not found in table '{target_table}'. "
                    f"Setting reference to null."
                ),
                table=target_table,
            )

        return lookup[key_value], None

    def is_registered(self, table_name: str) -> bool:
        return table_name in self._lookups

    def clear(self) -> None:
        """Forget all registered tables."""
        self._lookups.clear()
