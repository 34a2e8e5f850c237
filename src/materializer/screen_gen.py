"""Presentation-layer emission: React pages and the app shell.

One page per declared screen, specialised by screen kind:

* ``list``   -- table of the first few data columns, fetched on mount.
* ``form``   -- one input per data column, posted to the create endpoint.
* ``detail`` -- (and any other kind) one record fetched by route parameter,
  showing every stored column including the key and audit columns.

A screen's data source is the table it names, falling back to the first
table of its module.  Modules without tables still get a placeholder page.
"""

from __future__ import annotations

import re
from typing import Any

from .layout import PAGES_DIR, PRESENTATION_DIR, make_file
from .models import (
    ColumnDefinition,
    GeneratedFile,
    ModuleDefinition,
    ProjectContext,
    ScreenDefinition,
    ScreenKind,
    TableDefinition,
)
from .naming import identifiers, to_camel_case, to_label, to_pascal_case
from .route_gen import module_mount_path
from .schema_gen import table_key
from .templates import TemplateRenderer
from .type_map import html_input_type, map_column_type

LIST_COLUMN_LIMIT = 5

_TRAILING_NEW = re.compile(r"/new/?$")
_TRAILING_PARAM = re.compile(r"/:([^/]+)/?$")


# ---------------------------------------------------------------------------
# Route helpers
# ---------------------------------------------------------------------------


def list_route_for_form(route: str) -> str:
    """Where a form navigates after saving: its route minus a trailing ``/new``."""
    stripped = _TRAILING_NEW.sub("", route)
    return stripped or "/"


def list_route_for_detail(route: str) -> str:
    """A detail page's back link: its route minus a trailing ``/:param``."""
    stripped = _TRAILING_PARAM.sub("", route)
    return stripped or "/"


def route_param(route: str, default: str = "id") -> str:
    """Name of the trailing ``:param`` segment of *route*, if any."""
    match = _TRAILING_PARAM.search(route)
    return match.group(1) if match else default


def page_component_name(screen: ScreenDefinition) -> str:
    return to_pascal_case(screen.name)


def page_path(screen: ScreenDefinition) -> str:
    return f"{PAGES_DIR}/{page_component_name(screen)}.tsx"


# ---------------------------------------------------------------------------
# ScreenGenerator
# ---------------------------------------------------------------------------


class ScreenGenerator:
    """Emits one page per screen plus the shared app shell."""

    _KIND_TEMPLATES: dict[ScreenKind, str] = {
        ScreenKind.LIST: "frontend/ListPage.tsx.j2",
        ScreenKind.FORM: "frontend/FormPage.tsx.j2",
        ScreenKind.DETAIL: "frontend/DetailPage.tsx.j2",
        ScreenKind.OTHER: "frontend/DetailPage.tsx.j2",
    }

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, context: ProjectContext) -> list[GeneratedFile]:
        """Return the app shell followed by every screen page, in model order."""
        files = self.generate_shell(context)
        for module in context.modules:
            for screen in module.screens:
                files.append(self.generate_screen(screen, module))
        return files

    def generate_screen(
        self, screen: ScreenDefinition, module: ModuleDefinition
    ) -> GeneratedFile:
        """Render the page for a single screen."""
        component = page_component_name(screen)
        table = module.screen_table(screen)

        if table is None:
            content = self.renderer.render(
                "frontend/PlaceholderPage.tsx.j2",
                {"component": component, "title": to_label(screen.name)},
            )
            return make_file(page_path(screen), content)

        ctx = {
            "component": component,
            "route": screen.route,
            "table": _table_view(table),
            "endpoint": f"{module_mount_path(module)}/{identifiers(table.name).kebab}",
        }
        if screen.kind == ScreenKind.LIST:
            ctx["columns"] = ctx["table"]["data_columns"][:LIST_COLUMN_LIMIT]
            ctx["item_base"] = screen.route.rstrip("/")
        elif screen.kind == ScreenKind.FORM:
            ctx["columns"] = ctx["table"]["data_columns"]
            ctx["list_route"] = list_route_for_form(screen.route)
        else:
            ctx["columns"] = ctx["table"]["interface_fields"]
            ctx["param"] = route_param(screen.route)
            ctx["back_route"] = list_route_for_detail(screen.route)

        content = self.renderer.render(self._KIND_TEMPLATES[screen.kind], ctx)
        return make_file(page_path(screen), content)

    def generate_shell(self, context: ProjectContext) -> list[GeneratedFile]:
        """Render ``index.html``, the entry module, stylesheet and router."""
        pages = []
        for module in context.modules:
            for screen in module.screens:
                component = page_component_name(screen)
                pages.append({
                    "component": component,
                    "route": screen.route,
                    "label": to_label(screen.name),
                    "nav": ":" not in screen.route,
                })

        shell_ctx = {
            "project_name": context.project_name,
            "domain": context.domain,
            "pages": pages,
        }
        return [
            make_file(
                f"{PRESENTATION_DIR}/index.html",
                self.renderer.render("frontend/index.html.j2", shell_ctx),
            ),
            make_file(
                f"{PRESENTATION_DIR}/src/main.tsx",
                self.renderer.render("frontend/main.tsx.j2", shell_ctx),
            ),
            make_file(
                f"{PRESENTATION_DIR}/src/index.css",
                self.renderer.render("frontend/index.css.j2", shell_ctx),
            ),
            make_file(
                f"{PRESENTATION_DIR}/src/App.tsx",
                self.renderer.render("frontend/App.tsx.j2", shell_ctx),
            ),
        ]


# ---------------------------------------------------------------------------
# Template context helpers
# ---------------------------------------------------------------------------


def _column_view(column: ColumnDefinition) -> dict[str, Any]:
    mapping = map_column_type(column.type)
    input_type = html_input_type(mapping)
    return {
        "camel": to_camel_case(column.name),
        "label": to_label(column.name),
        "ts_type": mapping.ts_type,
        "optional": column.nullable and not column.primary_key,
        "input_type": input_type,
        "initial": "false" if input_type == "checkbox" else '""',
    }


def _table_view(table: TableDefinition) -> dict[str, Any]:
    ids = identifiers(table.name)
    key = table_key(table)
    declared = [c for c in table.columns if not c.is_audit]

    interface_fields = []
    if key.implicit:
        interface_fields.append({
            "camel": key.camel,
            "label": to_label(key.name),
            "ts_type": key.mapping.ts_type,
            "optional": False,
        })
    for column in declared:
        view = _column_view(column)
        if column is table.key_column:
            view["optional"] = False
        interface_fields.append(view)
    interface_fields.extend([
        {"camel": "createdAt", "label": "Created At", "ts_type": "string", "optional": False},
        {"camel": "updatedAt", "label": "Updated At", "ts_type": "string", "optional": False},
    ])

    return {
        "pascal": ids.pascal,
        "label": to_label(table.name),
        "key": key.camel,
        "interface_fields": interface_fields,
        "data_columns": [_column_view(c) for c in table.data_columns],
    }
