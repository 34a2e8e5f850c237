"""Persistence-layer emission: the Drizzle schema and database client.

Every table of every module lands in one ``schema.ts``; module boundaries
are not reflected in the storage layer.  Each table declares its columns in
input order, followed by the ``createdAt``/``updatedAt`` audit columns.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from .layout import DB_DIR, make_file
from .models import CONVENTIONAL_KEY, ColumnDefinition, GeneratedFile, ProjectContext, TableDefinition
from .naming import identifiers, to_camel_case, to_snake_case
from .templates import TemplateRenderer
from .type_map import TypeMapping, map_column_type

IMPLICIT_KEY_MAPPING = TypeMapping("SERIAL", "number", "serial")

AUDIT_COLUMN_LINES: tuple[str, ...] = (
    'createdAt: timestamp("created_at").defaultNow().notNull(),',
    'updatedAt: timestamp("updated_at").defaultNow().notNull(),',
)

# Extra builder arguments some Drizzle column types require.
_BUILDER_OPTIONS: dict[str, str] = {
    "varchar": ", { length: 255 }",
    "decimal": ", { precision: 10, scale: 2 }",
    "bigint": ', { mode: "number" }',
}


class KeyColumn(NamedTuple):
    """The resolved primary key of a table."""

    name: str
    camel: str
    snake: str
    mapping: TypeMapping
    implicit: bool


def table_key(table: TableDefinition) -> KeyColumn:
    """Resolve the key of *table*.

    Uses the column marked primary, else a column named ``id``.  When
    neither exists the key is an implicit ``id`` serial column.
    """
    column = table.key_column
    if column is None:
        return KeyColumn(
            name=CONVENTIONAL_KEY,
            camel=CONVENTIONAL_KEY,
            snake=CONVENTIONAL_KEY,
            mapping=IMPLICIT_KEY_MAPPING,
            implicit=True,
        )
    return KeyColumn(
        name=column.name,
        camel=to_camel_case(column.name),
        snake=to_snake_case(column.name),
        mapping=map_column_type(column.type),
        implicit=False,
    )


def column_definition(column: ColumnDefinition, *, is_key: bool = False) -> str:
    """Render the Drizzle builder expression for one column."""
    mapping = map_column_type(column.type)
    expr = f'{mapping.orm_type}("{column.snake_name}"{_BUILDER_OPTIONS.get(mapping.orm_type, "")})'
    if is_key:
        expr += ".primaryKey()"
        if mapping.orm_type == "uuid":
            expr += ".defaultRandom()"
    elif not column.nullable:
        expr += ".notNull()"
    if column.unique and not is_key:
        expr += ".unique()"
    return expr


class SchemaGenerator:
    """Emits ``backend/src/db/schema.ts`` and ``backend/src/db/index.ts``."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, context: ProjectContext) -> list[GeneratedFile]:
        tables = [_table_view(table) for table in context.all_tables]
        builders: set[str] = set()
        for table in tables:
            builders.update(table["builders"])

        schema = self.renderer.render(
            "backend/schema.ts.j2",
            {"tables": tables, "builders": ["pgTable", *sorted(builders)]},
        )
        client = self.renderer.render("backend/db_index.ts.j2", {})
        return [
            make_file(f"{DB_DIR}/schema.ts", schema),
            make_file(f"{DB_DIR}/index.ts", client),
        ]


def _table_view(table: TableDefinition) -> dict[str, Any]:
    """Template context for one ``pgTable`` block."""
    ids = identifiers(table.name)
    key = table.key_column
    lines: list[str] = []
    builders = {"timestamp"}

    if key is None:
        lines.append(f'{CONVENTIONAL_KEY}: serial("{CONVENTIONAL_KEY}").primaryKey(),')
        builders.add("serial")

    for column in table.columns:
        # The implicit audit columns replace any declared column of the same name.
        if column.is_audit:
            continue
        line = f"{to_camel_case(column.name)}: {column_definition(column, is_key=column is key)},"
        if column.references:
            line += f" // references {to_snake_case(column.references)}"
        lines.append(line)
        builders.add(map_column_type(column.type).orm_type)

    lines.extend(AUDIT_COLUMN_LINES)
    return {
        "camel": ids.camel,
        "snake": ids.snake,
        "lines": lines,
        "builders": builders,
    }
