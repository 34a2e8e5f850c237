"""Main materialization orchestrator.

Takes a ``ProjectContext`` and writes a complete Express + Drizzle service and
React presentation app under ``<projects_dir>/<project_id>``.  All text is
computed up front by the emitters; only the final write step touches disk.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Sequence

from src.config import Config, PortConfig

from .config_gen import ConfigGenerator
from .diagnostics import collect_warnings
from .layout import PROJECT_DIRS, STACK_COMMANDS
from .models import GeneratedFile, MaterializedProject, ProjectContext, validate_project_id
from .reader import read_project_files
from .route_gen import RouteGenerator
from .schema_gen import SchemaGenerator
from .screen_gen import ScreenGenerator
from .templates import TemplateRenderer


class MaterializationError(Exception):
    """Raised when one or more directories or files could not be written.

    Every write is attempted before this is raised; files that were written
    successfully stay on disk.
    """

    def __init__(self, project_dir: Path, failures: Sequence[tuple[str, BaseException]]) -> None:
        self.project_dir = project_dir
        self.failures = list(failures)
        details = "; ".join(f"{path}: {exc}" for path, exc in self.failures)
        super().__init__(
            f"Failed to write {len(self.failures)} path(s) under {project_dir}: {details}"
        )

    @property
    def paths(self) -> list[str]:
        """Relative paths that could not be written."""
        return [path for path, _ in self.failures]


# ---------------------------------------------------------------------------
# Materializer
# ---------------------------------------------------------------------------


class Materializer:
    """Materialization orchestrator.

    Given a ``ProjectContext``, generates and writes:
    - the Drizzle schema and database client
    - one Express router per module plus the service entry point
    - one React page per screen plus the app shell
    - README, Docker Compose file and per-layer manifests
    """

    def __init__(
        self,
        projects_dir: str | Path,
        ports: PortConfig | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.projects_dir = Path(projects_dir)
        self.ports = ports or PortConfig()
        self.renderer = renderer or TemplateRenderer()
        self.route_gen = RouteGenerator(self.renderer)
        self.schema_gen = SchemaGenerator(self.renderer)
        self.screen_gen = ScreenGenerator(self.renderer)
        self.config_gen = ConfigGenerator(self.renderer)

    @classmethod
    def from_config(cls, config: Config) -> "Materializer":
        return cls(config.projects_dir, ports=config.ports)

    def project_dir(self, project_id: str) -> Path:
        """Directory the project *project_id* is (or would be) written to."""
        return self.projects_dir / validate_project_id(project_id)

    # -- Public API --------------------------------------------------------

    def build_files(self, context: ProjectContext) -> list[GeneratedFile]:
        """Compute every file of the project without touching disk.

        Order is fixed: service, persistence, presentation, then config.
        """
        files: list[GeneratedFile] = []
        files.extend(self.route_gen.generate(context, self.ports))
        files.extend(self.schema_gen.generate(context))
        files.extend(self.screen_gen.generate(context))
        files.extend(self.config_gen.generate(context, self.ports))
        return files

    async def materialize(self, context: ProjectContext) -> MaterializedProject:
        """Generate the project and write it to disk.

        Args:
            context: The validated project description.

        Returns:
            The written files, run commands and any diagnostics.

        Raises:
            MaterializationError: If any directory or file could not be
                written.  Raised only after every write has settled.
        """
        project_root = self.project_dir(context.project_id)
        files = self.build_files(context)

        # 1. Create the skeleton directory structure
        await self._create_directory_structure(project_root)

        # 2. Write every file concurrently
        await self._write_files(project_root, files)

        return MaterializedProject(
            project_dir=project_root,
            files=files,
            commands=STACK_COMMANDS,
            warnings=collect_warnings(context),
        )

    async def list_project_files(self, project_id: str) -> list[GeneratedFile]:
        """Read a previously materialized project back from disk."""
        return await read_project_files(self.project_dir(project_id))

    # -- Internal helpers --------------------------------------------------

    async def _create_directory_structure(self, root: Path) -> None:
        """Create the project root and the mandatory source directories."""
        dirs = ["", *PROJECT_DIRS]

        async def _mkdir(d: str) -> None:
            await asyncio.to_thread((root / d).mkdir, parents=True, exist_ok=True)

        results = await asyncio.gather(*[_mkdir(d) for d in dirs], return_exceptions=True)
        _raise_failures(root, dirs, results)

    async def _write_files(self, root: Path, files: list[GeneratedFile]) -> None:
        results = await asyncio.gather(
            *[asyncio.to_thread(_write_file, root / f.path, f.content) for f in files],
            return_exceptions=True,
        )
        _raise_failures(root, [f.path for f in files], results)


def _raise_failures(root: Path, paths: Sequence[str], results: Sequence[object]) -> None:
    failures = [
        (path or ".", result)
        for path, result in zip(paths, results)
        if isinstance(result, BaseException)
    ]
    if failures:
        raise MaterializationError(root, failures)


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
