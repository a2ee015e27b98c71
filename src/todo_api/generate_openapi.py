"""
Utility script to generate and write the OpenAPI schema for the FastAPI app.

This script imports the FastAPI application instance and serializes its OpenAPI
schema to interfaces/openapi.json so that API clients and documentation tools
can consume a stable schema without running the server.

Usage:
    python -m todo_api.generate_openapi [output_path]

Notes:
- The schema always lists the app tags (health, todos, search) first.
- The default output path is interfaces/openapi.json under the current directory.
"""
from __future__ import annotations

import json
import os
import sys
from typing import Any, Dict, Optional

from .main import app, openapi_tags

DEFAULT_OUTPUT = os.path.join("interfaces", "openapi.json")


def _with_app_tags(schema: Dict[str, Any]) -> Dict[str, Any]:
    # health, todos and search first, then any tags FastAPI already emitted
    by_name = {t["name"]: t for t in openapi_tags}
    extra = [t for t in schema.get("tags") or [] if t.get("name") not in by_name]
    schema["tags"] = list(by_name.values()) + extra
    return schema


# PUBLIC_INTERFACE
def generate_openapi(out_path: Optional[str] = None) -> str:
    """Write the OpenAPI schema to `out_path` (default interfaces/openapi.json) and return the path."""
    schema = _with_app_tags(app.openapi())

    path = out_path or DEFAULT_OUTPUT
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(schema, f, indent=2, ensure_ascii=False)
    return path


def main() -> None:
    path = generate_openapi(sys.argv[1] if len(sys.argv) > 1 else None)
    print(f"Wrote OpenAPI schema to: {path}")


if __name__ == "__main__":
    main()
