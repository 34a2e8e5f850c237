"""IPL materializer -- turns a project description into a runnable code tree.

This module takes a ``ProjectContext`` (modules, tables, columns, screens)
and writes an Express + Drizzle service, a React presentation app and the
manifests needed to run them.

Quick usage::

    from src.materializer import Materializer, ProjectContext

    context = ProjectContext.load("context.json")
    materializer = Materializer("/tmp/projects")
    project = await materializer.materialize(context)
    files = await materializer.list_project_files(context.project_id)
"""

from src.materializer.generator import MaterializationError, Materializer
from src.materializer.layout import classify_path
from src.materializer.models import (
    ArtifactClass,
    ColumnDefinition,
    GeneratedFile,
    MaterializedProject,
    ModuleDefinition,
    ProjectContext,
    ScreenDefinition,
    ScreenKind,
    TableDefinition,
)
from src.materializer.naming import identifiers
from src.materializer.reader import read_project_files
from src.materializer.templates import TemplateRenderer
from src.materializer.type_map import map_column_type

__all__ = [
    "ArtifactClass",
    "ColumnDefinition",
    "GeneratedFile",
    "MaterializationError",
    "MaterializedProject",
    "Materializer",
    "ModuleDefinition",
    "ProjectContext",
    "ScreenDefinition",
    "ScreenKind",
    "TableDefinition",
    "TemplateRenderer",
    "classify_path",
    "identifiers",
    "map_column_type",
    "read_project_files",
]
