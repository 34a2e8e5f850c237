"""Command-line entry point for the IPL materializer.

Examples::

    python -m src.cli materialize context.json --projects-dir ./projects
    python -m src.cli list my-project --class service
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import time
from collections import Counter
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from src.config import Config
from src.materializer import ArtifactClass, MaterializationError, Materializer, ProjectContext
from src.utils import (
    console,
    format_duration,
    load_json,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipl-materialize",
        description="IPL materializer -- generate a runnable project from a project context",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  ipl-materialize materialize context.json\n"
            "  ipl-materialize materialize context.json --projects-dir ./out\n"
            "  ipl-materialize list my-project --class presentation\n"
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    materialize = subparsers.add_parser(
        "materialize", help="Generate and write a project from a context JSON file"
    )
    materialize.add_argument("context", help="Path to the ProjectContext JSON file")
    materialize.add_argument(
        "--projects-dir",
        default=None,
        help="Root directory for generated projects (default: $IPL_PROJECTS_DIR or ./projects)",
    )

    list_cmd = subparsers.add_parser("list", help="List the files of a materialized project")
    list_cmd.add_argument("project_id", help="Identifier of a previously materialized project")
    list_cmd.add_argument(
        "--projects-dir",
        default=None,
        help="Root directory for generated projects (default: $IPL_PROJECTS_DIR or ./projects)",
    )
    list_cmd.add_argument(
        "--class",
        dest="artifact_class",
        choices=[c.value for c in ArtifactClass],
        default=None,
        help="Only list files of this artifact class",
    )
    return parser


def _materializer(projects_dir: str | None) -> Materializer:
    config = Config.from_env()
    if projects_dir:
        config = config.model_copy(update={"projects_dir": Path(projects_dir)})
    return Materializer.from_config(config)


def _run_materialize(args: argparse.Namespace) -> int:
    context_path = Path(args.context)
    if not context_path.exists():
        print_error(f"Error: Context file not found: {escape(str(context_path))}")
        return 1

    try:
        context = ProjectContext.model_validate(load_json(context_path))
    except (ValueError, ValidationError) as exc:
        print_error(f"Error: Invalid project context: {escape(str(exc))}")
        return 1

    materializer = _materializer(args.projects_dir)
    started = time.monotonic()
    try:
        project = asyncio.run(materializer.materialize(context))
    except MaterializationError as exc:
        print_error(f"Materialization failed: {escape(str(exc))}")
        return 1

    counts = Counter(f.artifact_class for f in project.files)
    summary = {"Project directory": str(project.project_dir)}
    for artifact_class in ArtifactClass:
        summary[f"{artifact_class.value} files"] = str(counts.get(artifact_class, 0))
    summary["Install"] = project.commands.install
    summary["Migrate"] = project.commands.migrate
    summary["Start"] = project.commands.start
    print_summary_table(summary, title=context.project_name)

    for warning in project.warnings:
        print_warning(f"Warning: {escape(warning)}")

    print_success(
        f"Materialized {len(project.files)} files in "
        f"{format_duration(time.monotonic() - started)}"
    )
    return 0


def _run_list(args: argparse.Namespace) -> int:
    materializer = _materializer(args.projects_dir)
    try:
        files = asyncio.run(materializer.list_project_files(args.project_id))
    except ValueError as exc:
        print_error(f"Error: {escape(str(exc))}")
        return 1

    if args.artifact_class:
        files = [f for f in files if f.artifact_class.value == args.artifact_class]

    if not files:
        print_warning(f"No files found for project '{escape(args.project_id)}'")
        return 0

    for f in files:
        console.print(f"[dim]{f.artifact_class.value:<12}[/dim] {escape(f.path)}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m src.cli`` and ``ipl-materialize``."""
    args = _build_parser().parse_args(argv)

    if args.command == "materialize":
        code = _run_materialize(args)
    else:
        code = _run_list(args)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
