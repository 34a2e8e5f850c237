"""Service-layer emission: one Express router per module.

Each table of a module gets the same five CRUD endpoints, regardless of the
module's descriptive ``apis`` list.  Handlers catch their own failures and
answer with a generic message so storage errors never leak to clients.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from src.config import PortConfig

from .layout import ROUTES_DIR, SERVICE_DIR, make_file
from .models import GeneratedFile, ModuleDefinition, ProjectContext, TableDefinition
from .naming import identifiers, to_kebab_case
from .schema_gen import table_key
from .templates import TemplateRenderer


class Endpoint(NamedTuple):
    """One emitted HTTP endpoint, relative to its module mount point."""

    method: str
    path: str
    action: str


def crud_endpoints(table: TableDefinition) -> list[Endpoint]:
    """The fixed CRUD endpoint set for *table*.

    Paths use the table's kebab-case name; single-record endpoints are
    suffixed with the key placeholder (``/invoice/:invoiceId``).
    """
    base = f"/{to_kebab_case(table.name)}"
    item = f"{base}/:{table_key(table).camel}"
    return [
        Endpoint("GET", base, "list"),
        Endpoint("GET", item, "get"),
        Endpoint("POST", base, "create"),
        Endpoint("PUT", item, "update"),
        Endpoint("DELETE", item, "delete"),
    ]


def module_mount_path(module: ModuleDefinition) -> str:
    """Where the module's router is mounted in the service app."""
    return f"/api/{to_kebab_case(module.name)}"


class RouteGenerator:
    """Emits the service entry point and one route file per module."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(
        self, context: ProjectContext, ports: PortConfig | None = None
    ) -> list[GeneratedFile]:
        files = [self.generate_entry(context, ports or PortConfig())]
        files.extend(self.generate_module(module) for module in context.modules)
        return files

    def generate_entry(self, context: ProjectContext, ports: PortConfig) -> GeneratedFile:
        """Render ``backend/src/index.ts`` mounting every module router."""
        modules = [
            {
                "camel": identifiers(m.name).camel,
                "kebab": identifiers(m.name).kebab,
                "mount": module_mount_path(m),
            }
            for m in context.modules
        ]
        content = self.renderer.render(
            "backend/index.ts.j2",
            {
                "project_name": context.project_name,
                "modules": modules,
                "port": ports.service,
            },
        )
        return make_file(f"{SERVICE_DIR}/src/index.ts", content)

    def generate_module(self, module: ModuleDefinition) -> GeneratedFile:
        """Render the router for a single module."""
        ids = identifiers(module.name)
        content = self.renderer.render(
            "backend/routes.ts.j2",
            {
                "module_name": module.name,
                "tables": [_table_view(t) for t in module.tables],
            },
        )
        return make_file(f"{ROUTES_DIR}/{ids.kebab}.ts", content)


def _table_view(table: TableDefinition) -> dict[str, Any]:
    ids = identifiers(table.name)
    key = table_key(table)
    param = f"req.params.{key.camel}"
    if key.mapping.ts_type == "number":
        param = f"Number({param})"
    return {
        "pascal": ids.pascal,
        "camel": ids.camel,
        "snake": ids.snake,
        "key": key.camel,
        "key_param": param,
        "endpoints": {e.action: e for e in crud_endpoints(table)},
    }
