#!/usr/bin/env python3
"""
Guard the layering of src/worksection_mcp/core/.

- core must stay transport-agnostic (no server frameworks, no transports package)
- tool modules talk to Worksection only through WorksectionClient, so they may
  not import an HTTP library themselves
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
CORE_DIR = REPO_ROOT / "src" / "worksection_mcp" / "core"
TOOLS_DIR = CORE_DIR / "tools"

CORE_FORBIDDEN = (
    "starlette",
    "uvicorn",
    "mcp.server",
    "worksection_mcp.transports",
)
TOOLS_FORBIDDEN = CORE_FORBIDDEN + ("httpx", "requests", "urllib.request")


def imported_modules(path: Path) -> list[str]:
    modules: list[str] = []
    for node in ast.walk(ast.parse(path.read_text())):
        if isinstance(node, ast.Import):
            modules.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            modules.append(node.module)
    return modules


def violations_in(directory: Path, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for py_file in sorted(directory.rglob("*.py")):
        for mod in imported_modules(py_file):
            if any(mod == p or mod.startswith(p + ".") for p in forbidden):
                found.append(f"{py_file}: forbidden import '{mod}'")
    return found


def main() -> int:
    violations = violations_in(CORE_DIR, CORE_FORBIDDEN)
    violations += violations_in(TOOLS_DIR, TOOLS_FORBIDDEN)
    for v in sorted(set(violations)):
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
