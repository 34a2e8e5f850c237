"""Tests for the ``ipl-materialize`` command line (src.cli)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.cli import main
from src.utils import console

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("IPL_PROJECTS_DIR", "IPL_SERVICE_PORT", "IPL_PRESENTATION_PORT", "IPL_DATABASE_PORT"):
        monkeypatch.delenv(var, raising=False)


class TestMaterializeCommand:
    def test_writes_project(self, context_file: Path, projects_dir: Path):
        with console.capture() as capture:
            main(["materialize", str(context_file), "--projects-dir", str(projects_dir)])

        output = capture.get()
        assert (projects_dir / "acme-billing" / "README.md").is_file()
        assert "Materialized" in output
        assert "Warning:" in output

    def test_projects_dir_from_env(self, context_file: Path, tmp_path: Path, monkeypatch):
        target = tmp_path / "from-env"
        monkeypatch.setenv("IPL_PROJECTS_DIR", str(target))

        with console.capture():
            main(["materialize", str(context_file)])

        assert (target / "acme-billing" / "backend" / "src" / "index.ts").is_file()

    def test_missing_context_file(self, tmp_path: Path):
        with console.capture() as capture, pytest.raises(SystemExit) as exc_info:
            main(["materialize", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1
        assert "not found" in capture.get()

    def test_invalid_context(self, tmp_path: Path, projects_dir: Path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"projectId": "../x", "projectName": "X"}), encoding="utf-8")

        with console.capture() as capture, pytest.raises(SystemExit) as exc_info:
            main(["materialize", str(path), "--projects-dir", str(projects_dir)])
        assert exc_info.value.code == 1
        assert "Invalid project context" in capture.get()

    def test_malformed_json(self, tmp_path: Path, projects_dir: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with console.capture(), pytest.raises(SystemExit) as exc_info:
            main(["materialize", str(path), "--projects-dir", str(projects_dir)])
        assert exc_info.value.code == 1

    def test_write_failure(self, context_file: Path, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with console.capture() as capture, pytest.raises(SystemExit) as exc_info:
            main(["materialize", str(context_file), "--projects-dir", str(blocker)])
        assert exc_info.value.code == 1
        assert "Materialization failed" in capture.get()


class TestListCommand:
    def test_lists_files(self, context_file: Path, projects_dir: Path):
        with console.capture():
            main(["materialize", str(context_file), "--projects-dir", str(projects_dir)])

        with console.capture() as capture:
            main(["list", "acme-billing", "--projects-dir", str(projects_dir)])
        output = capture.get()
        assert "backend/src/db/schema.ts" in output
        assert "frontend/src/pages/InvoiceList.tsx" in output

    def test_filter_by_class(self, context_file: Path, projects_dir: Path):
        with console.capture():
            main(["materialize", str(context_file), "--projects-dir", str(projects_dir)])

        with console.capture() as capture:
            main(["list", "acme-billing", "--projects-dir", str(projects_dir), "--class", "persistence"])
        output = capture.get()
        assert "backend/src/db/schema.ts" in output
        assert "README.md" not in output

    def test_unknown_project(self, projects_dir: Path):
        with console.capture() as capture:
            main(["list", "ghost", "--projects-dir", str(projects_dir)])
        assert "No files found" in capture.get()

    def test_invalid_class_rejected(self, projects_dir: Path):
        with pytest.raises(SystemExit) as exc_info:
            main(["list", "ghost", "--projects-dir", str(projects_dir), "--class", "docs"])
        assert exc_info.value.code == 2

    def test_invalid_project_id(self, projects_dir: Path):
        with console.capture(), pytest.raises(SystemExit) as exc_info:
            main(["list", "..", "--projects-dir", str(projects_dir)])
        assert exc_info.value.code == 1
