"""Semantic column type resolution.

Maps the loosely-typed, human-entered column type (``"decimal"``,
``"Timestamp with tz"``, ``"uuid pk"``...) onto the three representations the
generated stack needs: the SQL storage type, the TypeScript transport type
and the Drizzle ORM column builder.
"""

from __future__ import annotations

from typing import NamedTuple


class TypeMapping(NamedTuple):
    """Representations of one semantic type across the generated layers."""

    sql_type: str
    ts_type: str
    orm_type: str
    matched: bool = True


DEFAULT_MAPPING = TypeMapping("VARCHAR(255)", "string", "varchar", matched=False)

# Ordered most specific first: the first rule with a matching substring wins.
_TYPE_RULES: list[tuple[tuple[str, ...], TypeMapping]] = [
    (("serial",), TypeMapping("SERIAL", "number", "serial")),
    (("uuid",), TypeMapping("UUID", "string", "uuid")),
    (("bigint",), TypeMapping("BIGINT", "number", "bigint")),
    (("int",), TypeMapping("INTEGER", "number", "integer")),
    (("decimal", "numeric", "money"), TypeMapping("DECIMAL(10,2)", "number", "decimal")),
    (("float", "double", "real"), TypeMapping("REAL", "number", "real")),
    (("bool",), TypeMapping("BOOLEAN", "boolean", "boolean")),
    (("timestamp", "datetime"), TypeMapping("TIMESTAMP", "string", "timestamp")),
    (("date",), TypeMapping("DATE", "string", "date")),
    (("jsonb", "json"), TypeMapping("JSONB", "unknown", "jsonb")),
    (("text",), TypeMapping("TEXT", "string", "text")),
]


def map_column_type(semantic_type: str | None) -> TypeMapping:
    """Resolve *semantic_type* to its :class:`TypeMapping`.

    Matching is a case-insensitive substring test against the ordered rule
    table.  Unrecognised (or empty) types never raise: they resolve to
    :data:`DEFAULT_MAPPING`, whose ``matched`` flag is ``False`` so callers
    can surface a diagnostic.
    """
    lowered = (semantic_type or "").strip().lower()
    if not lowered:
        return DEFAULT_MAPPING
    for needles, mapping in _TYPE_RULES:
        if any(needle in lowered for needle in needles):
            return mapping
    return DEFAULT_MAPPING


def html_input_type(mapping: TypeMapping) -> str:
    """Pick the HTML ``<input type>`` for a form field of this type."""
    if mapping.orm_type == "boolean":
        return "checkbox"
    if mapping.orm_type == "timestamp":
        return "datetime-local"
    if mapping.orm_type == "date":
        return "date"
    if mapping.ts_type == "number":
        return "number"
    return "text"
