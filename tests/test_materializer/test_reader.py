"""Tests for reading a project tree back into file records."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.materializer.models import ArtifactClass
from src.materializer.reader import SKIP_DIRS, read_project_files

pytestmark = pytest.mark.unit


def _write(root: Path, relative: str, content: str = "x") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class TestReadProjectFiles:
    async def test_missing_directory(self, tmp_path: Path):
        assert await read_project_files(tmp_path / "nope") == []

    async def test_sorted_and_classified(self, tmp_path: Path):
        _write(tmp_path, "frontend/src/pages/List.tsx", "page")
        _write(tmp_path, "README.md", "# hi")
        _write(tmp_path, "backend/src/db/schema.ts", "schema")
        _write(tmp_path, "backend/src/routes/core.ts", "routes")

        files = await read_project_files(tmp_path)

        assert [(f.path, f.artifact_class) for f in files] == [
            ("README.md", ArtifactClass.CONFIG),
            ("backend/src/db/schema.ts", ArtifactClass.PERSISTENCE),
            ("backend/src/routes/core.ts", ArtifactClass.SERVICE),
            ("frontend/src/pages/List.tsx", ArtifactClass.PRESENTATION),
        ]
        assert files[0].content == "# hi"

    @pytest.mark.parametrize("skipped", sorted(SKIP_DIRS))
    async def test_skips_non_source_dirs(self, tmp_path: Path, skipped: str):
        _write(tmp_path, "backend/src/index.ts")
        _write(tmp_path, f"backend/{skipped}/junk.js")
        _write(tmp_path, f"{skipped}/junk.js")

        files = await read_project_files(tmp_path)
        assert [f.path for f in files] == ["backend/src/index.ts"]

    async def test_accepts_str_path(self, tmp_path: Path):
        _write(tmp_path, "README.md")
        files = await read_project_files(str(tmp_path))
        assert [f.path for f in files] == ["README.md"]

    async def test_empty_directories_ignored(self, tmp_path: Path):
        (tmp_path / "frontend/src/components").mkdir(parents=True)
        assert await read_project_files(tmp_path) == []
