"""Tests for the Drizzle schema emitter.

Covers:
- One pgTable block per table across all modules
- Declared column order with audit columns last
- Key resolution (marked primary, ``id`` convention, implicit serial)
- Column modifiers (notNull, unique, references comment)
- Builder import list
"""

from __future__ import annotations

import re

import pytest

from src.materializer.models import (
    ColumnDefinition,
    ModuleDefinition,
    ProjectContext,
    TableDefinition,
)
from src.materializer.schema_gen import (
    AUDIT_COLUMN_LINES,
    SchemaGenerator,
    column_definition,
    table_key,
)

pytestmark = pytest.mark.unit


def _context(*tables: TableDefinition, extra_module: ModuleDefinition | None = None) -> ProjectContext:
    modules = [ModuleDefinition(name="Core", tables=list(tables))]
    if extra_module is not None:
        modules.append(extra_module)
    return ProjectContext(project_id="p1", project_name="P1", modules=modules)


def _table(name: str, *columns: dict) -> TableDefinition:
    return TableDefinition(name=name, columns=[ColumnDefinition(**c) for c in columns])


def _block(schema: str, camel: str) -> list[str]:
    """Return the stripped column lines of one ``pgTable`` block."""
    match = re.search(rf"export const {camel} = pgTable\(\"\w+\", \{{\n(.*?)\n\}}\);", schema, re.S)
    assert match, f"no pgTable block for {camel}"
    return [line.strip() for line in match.group(1).splitlines()]


@pytest.fixture
def generator(renderer) -> SchemaGenerator:
    return SchemaGenerator(renderer)


# ---------------------------------------------------------------------------
# table_key / column_definition
# ---------------------------------------------------------------------------


class TestTableKey:
    def test_marked_primary(self):
        key = table_key(_table("t", {"name": "Invoice ID", "type": "uuid", "primary_key": True}))
        assert key.camel == "invoiceId"
        assert key.snake == "invoice_id"
        assert key.mapping.orm_type == "uuid"
        assert key.implicit is False

    def test_implicit(self):
        key = table_key(_table("t", {"name": "amount"}))
        assert key.camel == "id"
        assert key.mapping.orm_type == "serial"
        assert key.implicit is True


class TestColumnDefinition:
    def test_nullable_by_default(self):
        expr = column_definition(ColumnDefinition(name="note", type="text"))
        assert expr == 'text("note")'

    def test_not_null(self):
        expr = column_definition(ColumnDefinition(name="amount", type="decimal", nullable=False))
        assert expr == 'decimal("amount", { precision: 10, scale: 2 }).notNull()'

    def test_unique(self):
        expr = column_definition(ColumnDefinition(name="Email", unique=True))
        assert expr == 'varchar("email", { length: 255 }).unique()'

    def test_key(self):
        expr = column_definition(ColumnDefinition(name="id", type="serial"), is_key=True)
        assert expr == 'serial("id").primaryKey()'

    def test_uuid_key_default(self):
        expr = column_definition(ColumnDefinition(name="id", type="uuid"), is_key=True)
        assert expr == 'uuid("id").primaryKey().defaultRandom()'

    def test_key_ignores_not_null(self):
        column = ColumnDefinition(name="id", type="integer", nullable=False)
        assert column_definition(column, is_key=True) == 'integer("id").primaryKey()'


# ---------------------------------------------------------------------------
# SchemaGenerator
# ---------------------------------------------------------------------------


class TestSchemaGenerator:
    def test_emits_schema_and_client(self, generator, billing_context):
        files = generator.generate(billing_context)
        assert [f.path for f in files] == ["backend/src/db/schema.ts", "backend/src/db/index.ts"]
        assert all(f.artifact_class.value == "persistence" for f in files)

    def test_invoice_block(self, generator, billing_context):
        schema = generator.generate(billing_context)[0].content
        assert _block(schema, "invoice") == [
            'id: serial("id").primaryKey(),',
            'amount: decimal("amount", { precision: 10, scale: 2 }).notNull(),',
            'status: text("status"),',
            *AUDIT_COLUMN_LINES,
        ]

    def test_every_table_has_declared_plus_two_audit_columns(self, generator, billing_context):
        schema = generator.generate(billing_context)[0].content
        for table in billing_context.all_tables:
            lines = _block(schema, table.name)
            assert len(lines) == len(table.columns) + 2
            assert lines[-2:] == list(AUDIT_COLUMN_LINES)

    def test_references_are_comments(self, generator, billing_context):
        schema = generator.generate(billing_context)[0].content
        assert 'invoiceId: integer("invoice_id"), // references invoice' in schema
        assert ".references(" not in schema

    def test_tables_from_all_modules(self, generator):
        context = _context(
            _table("invoice", {"name": "id"}),
            extra_module=ModuleDefinition(name="CRM", tables=[_table("Customer Account", {"name": "id"})]),
        )
        schema = generator.generate(context)[0].content
        assert 'export const invoice = pgTable("invoice", {' in schema
        assert 'export const customerAccount = pgTable("customer_account", {' in schema

    def test_implicit_key_when_none_resolvable(self, generator):
        schema = generator.generate(_context(_table("note", {"name": "body", "type": "text"})))[0].content
        assert _block(schema, "note")[0] == 'id: serial("id").primaryKey(),'

    def test_id_column_is_key_without_primary_flag(self, generator):
        schema = generator.generate(
            _context(_table("note", {"name": "body", "type": "text"}, {"name": "id", "type": "uuid"}))
        )[0].content
        lines = _block(schema, "note")
        assert lines[0] == 'body: text("body"),'
        assert lines[1] == 'id: uuid("id").primaryKey().defaultRandom(),'
        assert sum("primaryKey()" in line for line in lines) == 1

    def test_declared_audit_column_not_duplicated(self, generator):
        schema = generator.generate(
            _context(_table("note", {"name": "id"}, {"name": "createdAt", "type": "timestamp"}))
        )[0].content
        assert schema.count('createdAt: timestamp("created_at")') == 1

    def test_import_lists_used_builders(self, generator, billing_context):
        schema = generator.generate(billing_context)[0].content
        assert schema.splitlines()[1] == (
            'import { pgTable, boolean, decimal, integer, serial, text, timestamp, uuid } '
            'from "drizzle-orm/pg-core";'
        )

    def test_no_tables(self, generator):
        schema = generator.generate(_context())[0].content
        assert "pgTable(" not in schema
        assert "export {};" in schema

    def test_deterministic(self, generator, billing_context):
        assert generator.generate(billing_context) == generator.generate(billing_context)

    def test_client_uses_database_url(self, generator, billing_context):
        client = generator.generate(billing_context)[1].content
        assert "process.env.DATABASE_URL" in client
        assert 'import * as schema from "./schema.js";' in client
