from __future__ import annotations

import json
from pathlib import Path
from typing import Any, cast

from shadcn_registry.errors import NotFound, RegistryError

MANIFEST_FILENAME = "registry.json"
MANIFEST_SCHEMA_URL = "https://ui.shadcn.com/schema/registry.json"

# Item `type` values as they appear in registry.json.
ITEM_TYPE_UI = "registry:ui"
ITEM_TYPE_HOOK = "registry:hook"
ITEM_TYPE_BLOCK = "registry:block"
FILE_TYPE_COMPONENT = "registry:component"

KIND_TO_ITEM_TYPE: dict[str, str] = {
    "component": ITEM_TYPE_UI,
    "hook": ITEM_TYPE_HOOK,
    "block": ITEM_TYPE_BLOCK,
}

RENDERABLE_ITEM_TYPES: frozenset[str] = frozenset({ITEM_TYPE_UI, ITEM_TYPE_BLOCK})


def manifest_path(registry_root: Path) -> Path:
    return registry_root / MANIFEST_FILENAME


def has_manifest(registry_root: Path) -> bool:
    return manifest_path(registry_root).is_file()


def load_manifest(registry_root: Path) -> dict[str, Any]:
    """Load registry.json and normalize `items` to a list of objects."""
    path = manifest_path(registry_root)
    if not path.is_file():
        raise NotFound(f"{MANIFEST_FILENAME} not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RegistryError(f"{path}: invalid JSON ({exc})") from exc
    if not isinstance(data, dict):
        raise RegistryError(f"{path}: expected a JSON object at the root")

    items = data.get("items")
    if items is None:
        data["items"] = []
    elif not isinstance(items, list):
        raise RegistryError(f"{path}: expected `items` to be an array")
    else:
        for item in items:
            if not isinstance(item, dict):
                raise RegistryError(f"{path}: each entry in `items` must be an object")
    return data


def dump_manifest(manifest: dict[str, Any]) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def write_manifest(registry_root: Path, manifest: dict[str, Any]) -> None:
    path = manifest_path(registry_root)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_manifest(manifest), encoding="utf-8")


def items_of(manifest: dict[str, Any]) -> list[dict[str, Any]]:
    return cast(list[dict[str, Any]], manifest.get("items") or [])


def items_of_type(manifest: dict[str, Any], item_type: str) -> list[dict[str, Any]]:
    return [item for item in items_of(manifest) if item.get("type") == item_type]


def find_item(manifest: dict[str, Any], name: str) -> dict[str, Any] | None:
    for item in items_of(manifest):
        if item.get("name") == name:
            return item
    return None


def item_names(items: list[dict[str, Any]]) -> list[str]:
    return [str(item.get("name")) for item in items if isinstance(item.get("name"), str)]


def file_paths(item: dict[str, Any]) -> list[str]:
    files = item.get("files") or []
    if not isinstance(files, list):
        return []
    out: list[str] = []
    for file_ref in files:
        if isinstance(file_ref, dict) and isinstance(file_ref.get("path"), str) and file_ref["path"]:
            out.append(file_ref["path"])
    return out


def build_item(
    *,
    name: str,
    item_type: str,
    dependencies: list[str],
    files: list[tuple[str, str]],
) -> dict[str, Any]:
    return {
        "name": name,
        "type": item_type,
        "dependencies": list(dependencies),
        "registryDependencies": [],
        "files": [{"path": path, "type": file_type} for path, file_type in files],
    }
