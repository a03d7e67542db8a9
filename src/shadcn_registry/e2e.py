"""
End-to-end smoke test: serve a registry, scaffold a Next.js consumer app and install every catalog item into it.

Steps run strictly in order and the first failure aborts the rest. The background registry server is stopped in
a `finally` block, so it is cleaned up on failure as well as on success.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shadcn_registry.console import info
from shadcn_registry.errors import NotFound, RegistryError, ValidationError
from shadcn_registry.manifest import has_manifest, item_names, items_of, load_manifest, manifest_path
from shadcn_registry.process import run_command, start_background, wait_for_http

COMPONENTS_JSON = "components.json"


@dataclass(frozen=True)
class PackageManager:
    name: str
    install: list[str]
    run: list[str]
    shadcn: list[str]
    create_next_app_flag: str
    reinstall_after_create: bool

    def create_app(self, app_name: str) -> list[str]:
        # create-next-app always runs through npx; bun is converted afterwards with `bun install`.
        return [
            "npx",
            "--yes",
            "create-next-app@latest",
            app_name,
            "--yes",
            "--ts",
            "--tailwind",
            "--eslint",
            "--app",
            self.create_next_app_flag,
        ]

    def dev_server(self, port: int) -> list[str]:
        return [*self.run, "dev", "--", "-p", str(port)]


PACKAGE_MANAGERS: dict[str, PackageManager] = {
    "npm": PackageManager(
        name="npm",
        install=["npm", "install"],
        run=["npm", "run"],
        shadcn=["npx", "shadcn@latest"],
        create_next_app_flag="--use-npm",
        reinstall_after_create=False,
    ),
    "pnpm": PackageManager(
        name="pnpm",
        install=["pnpm", "install"],
        run=["pnpm", "run"],
        shadcn=["pnpm", "dlx", "shadcn@latest"],
        create_next_app_flag="--use-pnpm",
        reinstall_after_create=False,
    ),
    "bun": PackageManager(
        name="bun",
        install=["bun", "install"],
        run=["bun", "run"],
        shadcn=["bunx", "shadcn@latest"],
        create_next_app_flag="--use-npm",
        reinstall_after_create=True,
    ),
}


@dataclass(frozen=True)
class ConsumerAppResult:
    app_path: Path
    registry_name: str
    installed_items: list[str]


def get_package_manager(name: str) -> PackageManager:
    try:
        return PACKAGE_MANAGERS[name]
    except KeyError:
        raise ValidationError(
            f"--package-manager must be one of {', '.join(PACKAGE_MANAGERS)} (got {name!r})"
        ) from None


def app_folder_error(app_path: Path) -> str | None:
    if not app_path.exists():
        return None
    if not app_path.is_dir():
        return "Path exists and is not a folder. Choose a new folder."
    if any(app_path.iterdir()):
        return "Folder exists and is not empty. Choose a new folder."
    return None


def registry_url(port: int) -> str:
    return f"http://localhost:{port}/r/{{name}}.json"


def configure_registry(app_path: Path, *, registry_name: str, port: int) -> dict[str, Any]:
    """Register the running registry in the consumer app's components.json."""
    components_path = app_path / COMPONENTS_JSON
    if not components_path.is_file():
        raise NotFound(f"{COMPONENTS_JSON} not found at {components_path} (did `shadcn init` run?)")
    try:
        components = json.loads(components_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RegistryError(f"{components_path}: invalid JSON ({exc})") from exc
    if not isinstance(components, dict):
        raise RegistryError(f"{components_path}: expected a JSON object at the root")

    registries = components.get("registries")
    if not isinstance(registries, dict):
        registries = {}
    registries[f"@{registry_name}"] = registry_url(port)
    components["registries"] = registries
    components_path.write_text(json.dumps(components, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return components


def create_test_app(
    *,
    registry_folder: Path,
    app_folder: Path,
    package_manager: str,
    port: int,
    ready_timeout_seconds: float,
) -> ConsumerAppResult:
    pm = get_package_manager(package_manager)
    registry_path = registry_folder.resolve()
    app_path = app_folder.resolve()

    if not has_manifest(registry_path):
        raise NotFound(f"registry.json not found in {registry_path}")
    problem = app_folder_error(app_path)
    if problem is not None:
        raise ValidationError(f"{app_path}: {problem}")

    manifest = load_manifest(registry_path)
    registry_name = manifest.get("name")
    if not isinstance(registry_name, str) or not registry_name:
        raise ValidationError(f"{manifest_path(registry_path)}: missing registry `name`")

    if not (registry_path / "node_modules").exists():
        run_command(pm.install, cwd=registry_path, description="Installing registry dependencies...")
    run_command([*pm.run, "registry:build"], cwd=registry_path, description="Building registry...")

    server = start_background(pm.dev_server(port), cwd=registry_path, label="registry")
    try:
        info(f"Waiting for the registry server on port {port}...")
        wait_for_http(f"http://localhost:{port}", timeout_seconds=ready_timeout_seconds, process=server)

        app_path.parent.mkdir(parents=True, exist_ok=True)
        run_command(pm.create_app(app_path.name), cwd=app_path.parent, description="Creating Next.js app...")
        if pm.reinstall_after_create:
            run_command(pm.install, cwd=app_path, description=f"Installing with {pm.name}...")

        run_command([*pm.shadcn, "init", "-y", "-d"], cwd=app_path, description="Initializing shadcn...")
        configure_registry(app_path, registry_name=registry_name, port=port)

        names = item_names(items_of(load_manifest(registry_path)))
        if names:
            run_command(
                [*pm.shadcn, "add", *(f"@{registry_name}/{n}" for n in names)],
                cwd=app_path,
                description=f"Adding registry components: {', '.join(names)}...",
            )
    finally:
        server.terminate()

    return ConsumerAppResult(app_path=app_path, registry_name=registry_name, installed_items=names)
