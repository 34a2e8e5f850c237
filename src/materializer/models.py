"""Pydantic v2 models for the materialization engine.

Input models (``ProjectContext`` and everything it contains) accept the
camelCase keys produced by upstream JSON (``projectId``, ``primaryKey``) as
well as the snake_case attribute names.  All models are frozen: a context is
built once per request and generated files are never mutated.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .naming import to_pascal_case, to_snake_case

CONVENTIONAL_KEY = "id"
AUDIT_COLUMN_NAMES: frozenset[str] = frozenset({"created_at", "updated_at"})

# Identifiers the generated App.tsx declares or imports itself.
RESERVED_COMPONENT_NAMES: frozenset[str] = frozenset({"App", "Home", "Link", "Route", "Routes"})


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ArtifactClass(str, Enum):
    """Which layer of the generated project a file belongs to."""
    PERSISTENCE = "persistence"
    SERVICE = "service"
    PRESENTATION = "presentation"
    CONFIG = "config"


class ScreenKind(str, Enum):
    """UI page flavours the screen emitter knows how to render."""
    LIST = "list"
    FORM = "form"
    DETAIL = "detail"
    OTHER = "other"


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ---------------------------------------------------------------------------
# Input model
# ---------------------------------------------------------------------------


class ColumnDefinition(_Model):
    """A single column of a table."""
    name: str = Field(..., description="Column name as entered by the user")
    type: str = Field(default="", description="Semantic type, e.g. 'decimal', 'uuid'")
    primary_key: bool = Field(default=False)
    references: Optional[str] = Field(
        default=None, description="Referenced table name (advisory only)"
    )
    nullable: bool = Field(default=True)
    unique: bool = Field(default=False)

    @property
    def snake_name(self) -> str:
        return to_snake_case(self.name)

    @property
    def is_audit(self) -> bool:
        return self.snake_name in AUDIT_COLUMN_NAMES


class TableDefinition(_Model):
    """A data table.

    Column names must be unique (after snake_case normalisation, since two
    spellings of the same name collide in every generated layer) and at most
    one column may be marked primary.
    """
    name: str
    columns: list[ColumnDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_columns(self) -> "TableDefinition":
        seen: dict[str, str] = {}
        for column in self.columns:
            key = column.snake_name
            if key in seen:
                raise ValueError(
                    f"Table '{self.name}' declares column '{column.name}' more than "
                    f"once (clashes with '{seen[key]}')"
                )
            seen[key] = column.name

        primaries = [c.name for c in self.columns if c.primary_key]
        if len(primaries) > 1:
            raise ValueError(
                f"Table '{self.name}' marks more than one primary key: "
                f"{', '.join(primaries)}"
            )
        return self

    @property
    def key_column(self) -> Optional[ColumnDefinition]:
        """The declared key column, if one can be resolved.

        The column marked primary wins; otherwise a column named ``id``.
        """
        for column in self.columns:
            if column.primary_key:
                return column
        for column in self.columns:
            if column.snake_name == CONVENTIONAL_KEY:
                return column
        return None

    @property
    def key_name(self) -> str:
        """Name of the key column, falling back to the ``id`` convention."""
        column = self.key_column
        return column.name if column is not None else CONVENTIONAL_KEY

    @property
    def data_columns(self) -> list[ColumnDefinition]:
        """Declared columns that are neither the key nor audit columns."""
        key = self.key_column
        return [
            c for c in self.columns
            if c is not key and not c.is_audit
        ]


class ApiDescriptor(_Model):
    """An API the module is documented to expose (descriptive only)."""
    method: str = Field(default="GET")
    path: str = Field(default="/")
    description: str = Field(default="")


class ScreenDefinition(_Model):
    """A UI page.

    ``kind`` is read from either ``kind`` or the legacy ``type`` key; unknown
    kinds collapse to ``ScreenKind.OTHER``.  ``table`` optionally binds the
    screen to a table of its module; when omitted the module's first table is
    used.
    """
    name: str
    kind: ScreenKind = Field(
        default=ScreenKind.OTHER,
        validation_alias=AliasChoices("kind", "type"),
    )
    route: str = Field(default="/")
    table: Optional[str] = Field(default=None)

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> Any:
        if isinstance(value, ScreenKind):
            return value
        normalized = str(value or "").strip().lower()
        try:
            return ScreenKind(normalized)
        except ValueError:
            return ScreenKind.OTHER

    @field_validator("route", mode="before")
    @classmethod
    def _normalize_route(cls, value: Any) -> str:
        route = str(value or "").strip()
        if not route.startswith("/"):
            route = "/" + route
        return route


class ModuleDefinition(_Model):
    """One bounded area of functionality."""
    name: str
    description: str = Field(default="")
    status: str = Field(default="")
    tables: list[TableDefinition] = Field(default_factory=list)
    apis: list[ApiDescriptor] = Field(default_factory=list)
    screens: list[ScreenDefinition] = Field(default_factory=list)

    def find_table(self, name: str) -> Optional[TableDefinition]:
        """Look up a table by name, ignoring case convention."""
        wanted = to_snake_case(name)
        for table in self.tables:
            if to_snake_case(table.name) == wanted:
                return table
        return None

    def screen_table(self, screen: ScreenDefinition) -> Optional[TableDefinition]:
        """Resolve the data source of *screen*.

        The explicitly bound table when it exists, else the first table of
        the module, else ``None``.
        """
        if screen.table:
            table = self.find_table(screen.table)
            if table is not None:
                return table
        return self.tables[0] if self.tables else None


def validate_project_id(project_id: str) -> str:
    """Ensure *project_id* is usable as a single directory name."""
    value = project_id.strip()
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValueError(f"Invalid project id {project_id!r}: must be a single path segment")
    return value


class ProjectContext(_Model):
    """Everything needed to materialize one project."""
    project_id: str
    project_name: str
    domain: str = Field(default="business")
    database: str = Field(default="postgresql")
    modules: list[ModuleDefinition] = Field(default_factory=list)

    @field_validator("project_id")
    @classmethod
    def _check_project_id(cls, value: str) -> str:
        return validate_project_id(value)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "ProjectContext":
        """Reject names that would collide in the generated project.

        Module names share one routes directory, table names share one
        schema file and screen names share one pages directory and the
        ``App.tsx`` scope.
        """
        modules: dict[str, str] = {}
        tables: dict[str, tuple[str, str]] = {}
        pages: dict[str, tuple[str, str]] = {}
        for module in self.modules:
            key = to_snake_case(module.name)
            if key in modules:
                raise ValueError(
                    f"Module '{module.name}' clashes with module '{modules[key]}'"
                )
            modules[key] = module.name

            for table in module.tables:
                key = to_snake_case(table.name)
                if key in tables:
                    other, owner = tables[key]
                    raise ValueError(
                        f"Table '{table.name}' in module '{module.name}' clashes with "
                        f"table '{other}' in module '{owner}'"
                    )
                tables[key] = (table.name, module.name)

            for screen in module.screens:
                component = to_pascal_case(screen.name)
                if component in RESERVED_COMPONENT_NAMES:
                    raise ValueError(
                        f"Screen '{screen.name}' in module '{module.name}' uses the "
                        f"reserved page name '{component}'"
                    )
                if component in pages:
                    other, owner = pages[component]
                    raise ValueError(
                        f"Screen '{screen.name}' in module '{module.name}' clashes with "
                        f"screen '{other}' in module '{owner}'"
                    )
                pages[component] = (screen.name, module.name)
        return self

    @property
    def all_tables(self) -> list[TableDefinition]:
        """Tables of every module, flattened in module order."""
        return [table for module in self.modules for table in module.tables]

    @classmethod
    def load(cls, path: str | Path) -> "ProjectContext":
        """Load and validate a context from a JSON file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)


# ---------------------------------------------------------------------------
# Output model
# ---------------------------------------------------------------------------


class GeneratedFile(_Model):
    """A single emitted artifact."""
    path: str = Field(..., description="POSIX path relative to the project root")
    content: str
    artifact_class: ArtifactClass


class ProjectCommands(_Model):
    """Shell commands to run the generated stack."""
    install: str
    migrate: str
    start: str


class MaterializedProject(_Model):
    """Result of one materialization pass."""
    project_dir: Path
    files: list[GeneratedFile] = Field(default_factory=list)
    commands: ProjectCommands
    warnings: list[str] = Field(default_factory=list)

    def files_by_class(self, artifact_class: ArtifactClass) -> list[GeneratedFile]:
        return [f for f in self.files if f.artifact_class == artifact_class]
