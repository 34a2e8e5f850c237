"""IPL materializer configuration.

Centralised, typed configuration for the materializer. All settings use
Pydantic v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class PortConfig(BaseModel):
    """Port allocation for the generated stack.

    ``service`` is the API server, ``presentation`` the Vite dev server and
    ``database`` the host port Docker Compose publishes PostgreSQL on.
    """

    service: int = Field(default=3001, ge=1024, le=65535)
    presentation: int = Field(default=3002, ge=1024, le=65535)
    database: int = Field(default=5432, ge=1024, le=65535)

    def as_dict(self) -> dict[str, int]:
        """Return a plain ``{layer: port}`` mapping."""
        return {
            "service": self.service,
            "presentation": self.presentation,
            "database": self.database,
        }


class Config(BaseModel):
    """Global materializer configuration.

    Instances are typically created once by the CLI entry point and handed to
    :class:`~src.materializer.generator.Materializer`.
    """

    projects_dir: Path = Field(
        default=Path("./projects"),
        description="Root under which each project gets its own directory",
    )
    ports: PortConfig = Field(default_factory=PortConfig)

    def project_dir(self, project_id: str) -> Path:
        """Directory a project with *project_id* is materialized into."""
        return self.projects_dir / project_id

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            IPL_PROJECTS_DIR, IPL_SERVICE_PORT, IPL_PRESENTATION_PORT,
            IPL_DATABASE_PORT.
        """
        port_kwargs: dict[str, Any] = {}
        if os.environ.get("IPL_SERVICE_PORT"):
            port_kwargs["service"] = int(os.environ["IPL_SERVICE_PORT"])
        if os.environ.get("IPL_PRESENTATION_PORT"):
            port_kwargs["presentation"] = int(os.environ["IPL_PRESENTATION_PORT"])
        if os.environ.get("IPL_DATABASE_PORT"):
            port_kwargs["database"] = int(os.environ["IPL_DATABASE_PORT"])

        return cls(
            projects_dir=Path(os.environ.get("IPL_PROJECTS_DIR", "./projects")),
            ports=PortConfig(**port_kwargs),
        )
