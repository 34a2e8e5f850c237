"""Shared pytest fixtures for the IPL materializer test suite.

Provides reusable fixtures for:
- Temporary projects roots
- Sample project contexts (raw upstream JSON and validated models)
- A template renderer and a materializer bound to a temp directory
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from src.config import PortConfig
from src.materializer import Materializer, ProjectContext, TemplateRenderer


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    """Temporary root for materialized projects (auto-cleanup)."""
    root = tmp_path / "projects"
    root.mkdir()
    return root


# ---------------------------------------------------------------------------
# Sample contexts
# ---------------------------------------------------------------------------

@pytest.fixture
def billing_context_dict() -> dict[str, Any]:
    """Upstream-shaped JSON for a small billing project.

    Uses the camelCase keys the upstream model produces.
    """
    return {
        "projectId": "acme-billing",
        "projectName": "Acme Billing",
        "domain": "finance",
        "database": "postgresql",
        "modules": [
            {
                "name": "Billing",
                "description": "Invoices and payments",
                "status": "active",
                "tables": [
                    {
                        "name": "invoice",
                        "columns": [
                            {"name": "id", "type": "serial", "primaryKey": True},
                            {"name": "amount", "type": "decimal", "nullable": False},
                            {"name": "status", "type": "text"},
                        ],
                    },
                    {
                        "name": "payment",
                        "columns": [
                            {"name": "payment_id", "type": "uuid", "primaryKey": True},
                            {"name": "invoice_id", "type": "integer", "references": "invoice"},
                            {"name": "paid_at", "type": "timestamp"},
                            {"name": "is_refund", "type": "boolean"},
                        ],
                    },
                ],
                "apis": [
                    {"method": "GET", "path": "/invoices", "description": "List invoices"},
                ],
                "screens": [
                    {"name": "Invoice List", "type": "list", "route": "/invoices"},
                    {"name": "New Invoice", "type": "form", "route": "/invoices/new"},
                    {"name": "Invoice Detail", "type": "detail", "route": "/invoices/:id"},
                    {
                        "name": "Payment List",
                        "type": "list",
                        "route": "/payments",
                        "table": "payment",
                    },
                ],
            },
            {
                "name": "Reports",
                "description": "Static dashboards",
                "status": "planned",
                "tables": [],
                "apis": [],
                "screens": [
                    {"name": "Revenue Dashboard", "type": "other", "route": "/reports"},
                ],
            },
        ],
    }


@pytest.fixture
def billing_context(billing_context_dict: dict[str, Any]) -> ProjectContext:
    """Validated ``ProjectContext`` built from :func:`billing_context_dict`."""
    return ProjectContext.model_validate(billing_context_dict)


@pytest.fixture
def context_file(tmp_path: Path, billing_context_dict: dict[str, Any]) -> Path:
    """The billing context written to a JSON file."""
    path = tmp_path / "context.json"
    path.write_text(json.dumps(billing_context_dict, indent=2), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Engine objects
# ---------------------------------------------------------------------------

@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


@pytest.fixture
def materializer(projects_dir: Path) -> Materializer:
    """Materializer writing into the temporary projects root."""
    return Materializer(projects_dir, ports=PortConfig())
