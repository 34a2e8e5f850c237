"""Directory layout of a materialized project and artifact classification.

The classifier is shared by the emitters (when they build ``GeneratedFile``
records) and by the reader (when it walks a tree back from disk), so a
write/read round trip always yields the same artifact classes.
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import PurePosixPath

from .models import ArtifactClass, GeneratedFile, ProjectCommands

SERVICE_DIR = "backend"
PRESENTATION_DIR = "frontend"

ROUTES_DIR = f"{SERVICE_DIR}/src/routes"
DB_DIR = f"{SERVICE_DIR}/src/db"
PAGES_DIR = f"{PRESENTATION_DIR}/src/pages"
COMPONENTS_DIR = f"{PRESENTATION_DIR}/src/components"

# Created up-front on every materialization, even when nothing lands in them.
PROJECT_DIRS: tuple[str, ...] = (ROUTES_DIR, DB_DIR, PAGES_DIR, COMPONENTS_DIR)

STACK_COMMANDS = ProjectCommands(
    install=f"cd {SERVICE_DIR} && npm install && cd ../{PRESENTATION_DIR} && npm install",
    migrate=f"cd {SERVICE_DIR} && npm run db:push",
    start=f"cd {SERVICE_DIR} && npm run dev & cd ../{PRESENTATION_DIR} && npm run dev",
)

_CONFIG_FILE_PATTERNS: tuple[str, ...] = (
    "package.json",
    "tsconfig*.json",
    "*.config.ts",
    ".env*",
    "docker-compose*.yml",
)


def classify_path(path: str) -> ArtifactClass:
    """Derive the artifact class of a project-relative path.

    Rules, first match wins: tooling/manifest files and root-level files are
    config; anything under a ``db/`` directory is persistence; the rest of
    ``backend/`` is service and the rest of ``frontend/`` is presentation.
    """
    posix = PurePosixPath(path.replace("\\", "/"))
    if len(posix.parts) <= 1 or any(fnmatch(posix.name, pat) for pat in _CONFIG_FILE_PATTERNS):
        return ArtifactClass.CONFIG
    if "db" in posix.parts[:-1]:
        return ArtifactClass.PERSISTENCE
    if posix.parts[0] == SERVICE_DIR:
        return ArtifactClass.SERVICE
    if posix.parts[0] == PRESENTATION_DIR:
        return ArtifactClass.PRESENTATION
    return ArtifactClass.CONFIG


def make_file(path: str, content: str) -> GeneratedFile:
    """Build a ``GeneratedFile`` classified by :func:`classify_path`."""
    return GeneratedFile(path=path, content=content, artifact_class=classify_path(path))
