"""Supporting manifests and documentation for the generated project.

Emits the README (a per-module summary plus run instructions), a Docker
Compose file for the development database, and the package/tooling manifests
both halves of the generated stack need to install and run.
"""

from __future__ import annotations

import json
from typing import Any

from src.config import PortConfig

from .layout import PRESENTATION_DIR, SERVICE_DIR, STACK_COMMANDS, make_file
from .models import GeneratedFile, ProjectContext
from .naming import to_kebab_case, to_snake_case
from .route_gen import crud_endpoints, module_mount_path
from .templates import TemplateRenderer


class ConfigGenerator:
    """Generates root-level docs and per-layer manifests."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(
        self, context: ProjectContext, ports: PortConfig | None = None
    ) -> list[GeneratedFile]:
        ports = ports or PortConfig()
        ctx = _build_context(context, ports)
        slug = to_kebab_case(context.project_name)

        return [
            make_file("README.md", self.renderer.render("project/README.md.j2", ctx)),
            make_file(
                "docker-compose.yml",
                self.renderer.render("project/docker-compose.yml.j2", ctx),
            ),
            make_file(f"{SERVICE_DIR}/package.json", _json(_backend_package(slug))),
            make_file(f"{SERVICE_DIR}/tsconfig.json", _json(_BACKEND_TSCONFIG)),
            make_file(
                f"{SERVICE_DIR}/drizzle.config.ts",
                self.renderer.render("project/drizzle.config.ts.j2", ctx),
            ),
            make_file(
                f"{SERVICE_DIR}/.env.example",
                self.renderer.render("project/env.example.j2", ctx),
            ),
            make_file(f"{PRESENTATION_DIR}/package.json", _json(_frontend_package(slug, ports))),
            make_file(f"{PRESENTATION_DIR}/tsconfig.json", _json(_FRONTEND_TSCONFIG)),
            make_file(f"{PRESENTATION_DIR}/tsconfig.node.json", _json(_FRONTEND_NODE_TSCONFIG)),
            make_file(
                f"{PRESENTATION_DIR}/vite.config.ts",
                self.renderer.render("project/vite.config.ts.j2", ctx),
            ),
        ]


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

def _build_context(context: ProjectContext, ports: PortConfig) -> dict[str, Any]:
    modules = []
    for module in context.modules:
        mount = module_mount_path(module)
        modules.append({
            "name": module.name,
            "description": module.description,
            "status": module.status,
            "tables": [t.name for t in module.tables],
            "screens": [s.name for s in module.screens],
            "endpoints": [
                f"{e.method} {mount}{e.path}"
                for table in module.tables
                for e in crud_endpoints(table)
            ],
        })

    return {
        "project_name": context.project_name,
        "domain": context.domain,
        "database": context.database,
        "database_name": to_snake_case(context.project_name),
        "modules": modules,
        "ports": ports,
        "commands": STACK_COMMANDS,
    }


# ---------------------------------------------------------------------------
# JSON manifests
# ---------------------------------------------------------------------------

def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2) + "\n"


def _backend_package(slug: str) -> dict[str, Any]:
    return {
        "name": f"{slug}-backend",
        "version": "1.0.0",
        "private": True,
        "type": "module",
        "scripts": {
            "dev": "tsx watch src/index.ts",
            "build": "tsc",
            "start": "node dist/index.js",
            "db:push": "drizzle-kit push",
            "db:generate": "drizzle-kit generate",
        },
        "dependencies": {
            "cors": "^2.8.5",
            "dotenv": "^16.3.1",
            "drizzle-orm": "^0.29.0",
            "express": "^4.18.2",
            "pg": "^8.11.3",
        },
        "devDependencies": {
            "@types/cors": "^2.8.17",
            "@types/express": "^4.17.21",
            "@types/node": "^20.10.0",
            "@types/pg": "^8.10.9",
            "drizzle-kit": "^0.20.0",
            "tsx": "^4.6.2",
            "typescript": "^5.3.2",
        },
    }


def _frontend_package(slug: str, ports: PortConfig) -> dict[str, Any]:
    return {
        "name": f"{slug}-frontend",
        "version": "1.0.0",
        "private": True,
        "type": "module",
        "scripts": {
            "dev": f"vite --host 0.0.0.0 --port {ports.presentation}",
            "build": "tsc && vite build",
            "preview": "vite preview",
        },
        "dependencies": {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "react-router-dom": "^6.20.0",
        },
        "devDependencies": {
            "@types/react": "^18.2.0",
            "@types/react-dom": "^18.2.0",
            "@vitejs/plugin-react": "^4.2.0",
            "typescript": "^5.3.2",
            "vite": "^5.0.0",
        },
    }


_BACKEND_TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES2022",
        "module": "NodeNext",
        "moduleResolution": "NodeNext",
        "outDir": "./dist",
        "rootDir": "./src",
        "strict": True,
        "esModuleInterop": True,
        "skipLibCheck": True,
    },
    "include": ["src/**/*"],
    "exclude": ["node_modules"],
}

_FRONTEND_TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "target": "ES2020",
        "useDefineForClassFields": True,
        "lib": ["ES2020", "DOM", "DOM.Iterable"],
        "module": "ESNext",
        "skipLibCheck": True,
        "moduleResolution": "bundler",
        "allowImportingTsExtensions": True,
        "resolveJsonModule": True,
        "isolatedModules": True,
        "noEmit": True,
        "jsx": "react-jsx",
        "strict": True,
        "noUnusedLocals": True,
        "noUnusedParameters": True,
        "noFallthroughCasesInSwitch": True,
    },
    "include": ["src"],
    "references": [{"path": "./tsconfig.node.json"}],
}

_FRONTEND_NODE_TSCONFIG: dict[str, Any] = {
    "compilerOptions": {
        "composite": True,
        "skipLibCheck": True,
        "module": "ESNext",
        "moduleResolution": "bundler",
        "allowSyntheticDefaultImports": True,
    },
    "include": ["vite.config.ts"],
}
