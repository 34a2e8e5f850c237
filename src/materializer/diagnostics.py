"""Non-fatal findings about a project context.

Materialization never aborts on these; they are returned alongside the
generated files so callers can surface likely input mistakes.
"""

from __future__ import annotations

from .models import ProjectContext
from .type_map import map_column_type


def collect_warnings(context: ProjectContext) -> list[str]:
    """Return human-readable warnings for *context*, in model order."""
    warnings: list[str] = []

    for module in context.modules:
        for table in module.tables:
            for column in table.columns:
                if column.is_audit:
                    continue
                if not map_column_type(column.type).matched:
                    warnings.append(
                        f"{module.name}.{table.name}.{column.name}: unrecognized "
                        f"type {column.type!r}, stored as VARCHAR(255)"
                    )

        for screen in module.screens:
            if not module.tables:
                warnings.append(
                    f"{module.name}: screen '{screen.name}' has no table to display; "
                    "emitting a placeholder page"
                )
            elif screen.table and module.find_table(screen.table) is None:
                warnings.append(
                    f"{module.name}: screen '{screen.name}' names unknown table "
                    f"'{screen.table}'; using '{module.tables[0].name}'"
                )

    return warnings
