"""
Add and remove catalog items while keeping registry.json and the files on disk consistent.

`add_item` is all-or-nothing: once it starts writing, any failure deletes the files and directories it
created and restores the previous registry.json bytes before the exception propagates. `remove_item` is
best effort per file and has nothing to roll back.
"""

from __future__ import annotations

import dataclasses
import shutil
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Iterable

from shadcn_registry import templates
from shadcn_registry.console import warn
from shadcn_registry.errors import AlreadyExists, NotFound, ValidationError
from shadcn_registry.manifest import (
    FILE_TYPE_COMPONENT,
    ITEM_TYPE_BLOCK,
    ITEM_TYPE_HOOK,
    ITEM_TYPE_UI,
    KIND_TO_ITEM_TYPE,
    build_item,
    file_paths,
    find_item,
    item_names,
    items_of,
    items_of_type,
    load_manifest,
    manifest_path,
    write_manifest,
)
from shadcn_registry.naming import KINDS, validate_item_name, validate_style

DEFAULT_DEPENDENCIES: dict[str, tuple[str, ...]] = {
    "component": ("class-variance-authority",),
    "hook": (),
    "block": (),
}

_KIND_LABELS = {"component": "Component", "hook": "Hook", "block": "Block"}
_KIND_PLURALS = {"component": "components", "hook": "hooks", "block": "blocks"}


@dataclasses.dataclass(frozen=True)
class PlannedFile:
    path: str
    file_type: str
    render: Callable[[str], str]


@dataclasses.dataclass(frozen=True)
class AddResult:
    item: dict[str, Any]
    written: list[str]


@dataclasses.dataclass(frozen=True)
class RemoveResult:
    item: dict[str, Any]
    deleted: list[str]
    warnings: list[str]
    removed_dir: bool = False


def _require_kind(kind: str) -> str:
    if kind not in KINDS:
        raise ValidationError(f"Unknown item kind: {kind!r} (expected one of {', '.join(KINDS)})")
    return kind


def plan_files(kind: str, name: str, style: str) -> list[PlannedFile]:
    """Registry-relative paths (POSIX) and renderers for the files an item of `kind` consists of."""
    _require_kind(kind)
    base = f"registry/{style}"
    if kind == "component":
        return [PlannedFile(f"{base}/ui/{name}.tsx", ITEM_TYPE_UI, templates.render_component)]
    if kind == "hook":
        return [PlannedFile(f"{base}/hooks/{name}.ts", ITEM_TYPE_HOOK, templates.render_hook)]
    return [
        PlannedFile(f"{base}/blocks/{name}/{name}.tsx", FILE_TYPE_COMPONENT, templates.render_block_component),
        PlannedFile(f"{base}/blocks/{name}/use-{name}.ts", ITEM_TYPE_HOOK, templates.render_block_hook),
    ]


def parse_dependencies(value: str | Iterable[str] | None) -> list[str]:
    if value is None:
        return []
    raw = value.split(",") if isinstance(value, str) else list(value)
    return [part.strip() for part in raw if part and part.strip()]


def merge_dependencies(kind: str, extra: str | Iterable[str] | None) -> list[str]:
    out: list[str] = []
    for dep in [*DEFAULT_DEPENDENCIES[kind], *parse_dependencies(extra)]:
        if dep not in out:
            out.append(dep)
    return out


def _missing_dirs(directory: Path, stop: Path) -> list[Path]:
    """Directories between `stop` (exclusive) and `directory` (inclusive) that do not exist yet, deepest first."""
    missing: list[Path] = []
    current = directory
    while current != stop and not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent
    return missing


def _rollback(
    *,
    registry_root: Path,
    created_files: list[Path],
    created_dirs: list[Path],
    previous_manifest: bytes,
) -> None:
    for path in reversed(created_files):
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            warn(f"Rollback could not delete {path}: {exc}")
    for directory in created_dirs:
        try:
            directory.rmdir()
        except OSError:
            # Not empty or already gone.
            continue
    try:
        manifest_path(registry_root).write_bytes(previous_manifest)
    except OSError as exc:
        warn(f"Rollback could not restore {manifest_path(registry_root)}: {exc}")


def add_item(
    registry_root: Path,
    *,
    kind: str,
    name: str,
    style: str,
    dependencies: str | Iterable[str] | None = None,
) -> AddResult:
    _require_kind(kind)
    validate_item_name(kind, name)
    validate_style(style)

    manifest = load_manifest(registry_root)
    label = _KIND_LABELS[kind]
    if find_item(manifest, name) is not None:
        raise AlreadyExists(
            f'{label} "{name}" already exists in registry. Remove it first or choose a different name.'
        )

    planned = plan_files(kind, name, style)
    for planned_file in planned:
        target = registry_root / planned_file.path
        if target.exists():
            raise AlreadyExists(f"{label} already exists at {target}")

    previous_manifest = manifest_path(registry_root).read_bytes()
    created_files: list[Path] = []
    created_dirs: list[Path] = []
    item = build_item(
        name=name,
        item_type=KIND_TO_ITEM_TYPE[kind],
        dependencies=merge_dependencies(kind, dependencies),
        files=[(p.path, p.file_type) for p in planned],
    )

    try:
        for planned_file in planned:
            target = registry_root / planned_file.path
            for directory in _missing_dirs(target.parent, registry_root):
                if directory not in created_dirs:
                    created_dirs.append(directory)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(planned_file.render(name), encoding="utf-8")
            created_files.append(target)

        manifest["items"] = [*items_of(manifest), item]
        write_manifest(registry_root, manifest)
    except BaseException:
        created_dirs.sort(key=lambda p: len(p.parts), reverse=True)
        _rollback(
            registry_root=registry_root,
            created_files=created_files,
            created_dirs=created_dirs,
            previous_manifest=previous_manifest,
        )
        raise

    return AddResult(item=item, written=[p.path for p in planned])


def list_items(registry_root: Path, kind: str) -> list[dict[str, Any]]:
    manifest = load_manifest(registry_root)
    return items_of_type(manifest, KIND_TO_ITEM_TYPE[_require_kind(kind)])


def _removal_candidates(manifest: dict[str, Any], kind: str) -> list[dict[str, Any]]:
    candidates = items_of_type(manifest, KIND_TO_ITEM_TYPE[kind])
    if not candidates:
        raise NotFound(f"No {_KIND_PLURALS[kind]} in registry.")
    return candidates


def removable_names(registry_root: Path, kind: str) -> list[str]:
    """Names that `remove_item` would accept for `kind`, in manifest order."""
    _require_kind(kind)
    return item_names(_removal_candidates(load_manifest(registry_root), kind))


def _remove_tree_best_effort(directory: Path) -> bool:
    """Recursively delete `directory`, ignoring failures. Returns whether it is gone afterwards."""
    if not directory.exists():
        return False
    shutil.rmtree(directory, ignore_errors=True)
    return not directory.exists()


def remove_item(registry_root: Path, *, kind: str, name: str) -> RemoveResult:
    _require_kind(kind)
    manifest = load_manifest(registry_root)
    candidates = _removal_candidates(manifest, kind)

    item = next((c for c in candidates if c.get("name") == name), None)
    if item is None:
        available = ", ".join(item_names(candidates))
        raise NotFound(f'{_KIND_LABELS[kind]} "{name}" not found. Available: {available}')

    deleted: list[str] = []
    warnings: list[str] = []
    removed_dir = False
    paths = file_paths(item)
    for rel in paths:
        target = registry_root / rel
        if not target.exists():
            continue
        try:
            target.unlink()
            deleted.append(rel)
        except OSError as exc:
            msg = f"Could not delete {rel}: {exc}"
            warnings.append(msg)
            warn(msg)

    if item.get("type") == ITEM_TYPE_BLOCK and paths:
        removed_dir = _remove_tree_best_effort(registry_root / PurePosixPath(paths[0]).parent)

    manifest["items"] = [i for i in items_of(manifest) if i is not item]
    write_manifest(registry_root, manifest)
    return RemoveResult(item=item, deleted=deleted, warnings=warnings, removed_dir=removed_dir)
