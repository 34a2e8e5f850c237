"""Read a materialized project back into ``GeneratedFile`` records."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from .layout import make_file
from .models import GeneratedFile

# Dependency caches, VCS metadata and build output.
SKIP_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "dist",
    "build",
    ".vite",
    "drizzle",
})


async def read_project_files(project_dir: str | Path) -> list[GeneratedFile]:
    """Walk *project_dir* and return its files sorted by relative path.

    Artifact classes are derived from the path exactly as the emitters derive
    them.  A directory that does not exist yields an empty list.
    """
    return await asyncio.to_thread(_read_tree, Path(project_dir))


def _read_tree(root: Path) -> list[GeneratedFile]:
    if not root.is_dir():
        return []

    files: list[GeneratedFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for filename in filenames:
            full = Path(dirpath) / filename
            relative = full.relative_to(root).as_posix()
            content = full.read_text(encoding="utf-8", errors="replace")
            files.append(make_file(relative, content))

    files.sort(key=lambda f: f.path)
    return files
