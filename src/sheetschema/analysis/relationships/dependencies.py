"""Creation order for a batch of tables linked by foreign keys.

Tables are ordered with Kahn's topological sort so that every table comes
after the tables it references. Foreign keys pointing outside the batch
are not edges: the column is demoted to a plain integer and a warning is
recorded. A cycle fails the whole batch with a readable cycle path.

Input schemas are never mutated. Tables with demoted columns are returned
as deep copies.
"""

from __future__ import annotations

from collections import deque

from sheetschema.analysis.relationships.models import DependencyResolveResult
from sheetschema.core.logging import get_logger
from sheetschema.core.models.base import ValidationWarning, WarningLevel
from sheetschema.schema.models import TableSchema

logger = get_logger(__name__)

CYCLE_ARROW = " → "


def resolve_dependencies(schemas: list[TableSchema]) -> DependencyResolveResult:
    """Order schemas so that referenced tables come first.

    Args:
        schemas: Tables of one import batch, keyed by source_table_name

    Returns:
        DependencyResolveResult with the creation order, or a cycle error
    """
    if not schemas:
        return DependencyResolveResult.ok([])

    warnings: list[ValidationWarning] = []

    index_by_name: dict[str, int] = {}
    for index, schema in enumerate(schemas):
        name = schema.source_table_name
        if name in index_by_name:
            warnings.append(
                ValidationWarning(
                    level=WarningLevel.WARNING,
                    message=(
                        f"Table name '{name}' appears more than once; foreign keys "
                        f"resolve to the first occurrence"
                    ),
                    table=name,
                )
            )
            continue
        index_by_name[name] = index

    nodes = [_downgrade_dangling(schema, index_by_name, warnings) for schema in schemas]

    # dependencies[i]: tables node i references; dependents[j]: tables referencing j
    dependencies: list[list[int]] = [[] for _ in nodes]
    dependents: list[list[int]] = [[] for _ in nodes]
    in_degree = [0] * len(nodes)

    for index, schema in enumerate(nodes):
        for column in schema.foreign_key_columns:
            target = index_by_name[column.foreign_key_table or ""]
            if target in dependencies[index]:
                continue
            dependencies[index].append(target)
            dependents[target].append(index)
            in_degree[index] += 1

    queue = deque(i for i, degree in enumerate(in_degree) if degree == 0)
    ordered: list[int] = []

    while queue:
        current = queue.popleft()
        ordered.append(current)
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(ordered) == len(nodes):
        logger.debug(
            "dependencies_ordered",
            order=[nodes[i].source_table_name for i in ordered],
        )
        return DependencyResolveResult.ok([nodes[i] for i in ordered], warnings)

    processed = set(ordered)
    unprocessed = [i for i in range(len(nodes)) if i not in processed]
    cycle = _find_cycle(unprocessed, dependencies, nodes)

    logger.warning("dependency_cycle", cycle=cycle)
    return DependencyResolveResult.fail(
        f"Circular dependency detected: {cycle}. Break the cycle by removing a "
        f"foreign key relationship or excluding one of these tables.",
        warnings,
    )


def _downgrade_dangling(
    schema: TableSchema,
    index_by_name: dict[str, int],
    warnings: list[ValidationWarning],
) -> TableSchema:
    """Demote foreign keys whose target table is not in the batch.

    A table with demoted columns is returned as a deep copy that shares no
    columns, rows or attributes with the input.
    """
    dangling: list[int] = []

    for position, column in enumerate(schema.columns):
        target = column.foreign_key_table
        if not column.is_foreign_key or not target or target in index_by_name:
            continue

        warnings.append(
            ValidationWarning(
                level=WarningLevel.WARNING,
                message=(
                    f"Table '{schema.source_table_name}' references '{target}' which is "
                    f"not part of this import. Foreign key column '{column.original_header}' "
                    f"will be imported as a plain integer."
                ),
                table=schema.source_table_name,
                column=column.original_header,
            )
        )
        dangling.append(position)

    if not dangling:
        return schema

    demoted = schema.model_copy(deep=True)
    for position in dangling:
        demoted.columns[position] = demoted.columns[position].without_foreign_key()
    return demoted


def _find_cycle(
    unprocessed: list[int],
    dependencies: list[list[int]],
    nodes: list[TableSchema],
) -> str:
    """Walk dependency edges inside the unprocessed set until a node repeats."""
    remaining = set(unprocessed)

    for start in unprocessed:
        path: list[int] = []
        position: dict[int, int] = {}
        current: int | None = start

        while current is not None:
            if current in position:
                cycle = path[position[current] :] + [current]
                return CYCLE_ARROW.join(nodes[i].source_table_name for i in cycle)
            position[current] = len(path)
            path.append(current)
            current = next((d for d in dependencies[current] if d in remaining), None)

    # Unreachable for a true cycle; list the stuck tables instead
    return CYCLE_ARROW.join(nodes[i].source_table_name for i in unprocessed)
