from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from shadcn_registry.manifest import RENDERABLE_ITEM_TYPES, file_paths, items_of, load_manifest
from shadcn_registry.naming import to_pascal_case

EXPORTS_RELPATH = Path("registry") / "exports.ts"
HEADER = "// Auto-generated from registry.json - do not edit manually"

_LEADING_SEGMENT_RE = re.compile(r"^registry/")
_SOURCE_EXT_RE = re.compile(r"\.(tsx?|jsx?)$")


def _module_path(file_path: str) -> str:
    return _SOURCE_EXT_RE.sub("", _LEADING_SEGMENT_RE.sub("", file_path))


def export_lines(manifest: dict[str, Any]) -> list[str]:
    lines: list[str] = []
    for item in items_of(manifest):
        if item.get("type") not in RENDERABLE_ITEM_TYPES:
            continue
        paths = file_paths(item)
        name = item.get("name")
        if not paths or not isinstance(name, str) or not name:
            continue
        lines.append(f'export {{ {to_pascal_case(name)} }} from "./{_module_path(paths[0])}"')
    return lines


def render_exports(manifest: dict[str, Any]) -> str:
    lines = export_lines(manifest)
    if not lines:
        return f"{HEADER}\nexport {{}}\n"
    return HEADER + "\n" + "\n".join(lines) + "\n"


def write_registry_exports(registry_root: Path) -> Path:
    """Regenerate `registry/exports.ts` from registry.json (raises NotFound when the manifest is missing)."""
    manifest = load_manifest(registry_root)
    barrel_path = registry_root / EXPORTS_RELPATH
    barrel_path.parent.mkdir(parents=True, exist_ok=True)
    barrel_path.write_text(render_exports(manifest), encoding="utf-8")
    return barrel_path
