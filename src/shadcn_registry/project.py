from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shadcn_registry.errors import AlreadyExists, ValidationError
from shadcn_registry.exports import write_registry_exports
from shadcn_registry.manifest import manifest_path
from shadcn_registry.naming import validate_style
from shadcn_registry.process import run_command
from shadcn_registry.templates import load_page_template, render_registry_manifest

TEMPLATE_STYLE = "new-york"


@dataclass(frozen=True)
class Framework:
    value: str
    label: str
    implemented: bool


FRAMEWORKS: tuple[Framework, ...] = (
    Framework("next", "Next.js", True),
    Framework("vite", "Vite", False),
    Framework("sveltekit", "SvelteKit", False),
    Framework("vue", "Vue", False),
    Framework("static", "Static / Other", False),
)


@dataclass(frozen=True)
class CreatedProject:
    target_path: Path
    registry_name: str
    style: str
    homepage: str


def validate_registry_name(value: str) -> str:
    if not value or not value.strip():
        raise ValidationError("Registry name is required")
    return value.strip()


def validate_framework(value: str) -> str:
    for framework in FRAMEWORKS:
        if framework.value == value:
            if not framework.implemented:
                raise ValidationError(f"Framework {framework.label!r} is not implemented yet")
            return value
    known = ", ".join(f.value for f in FRAMEWORKS)
    raise ValidationError(f"Unknown framework {value!r} (expected one of: {known})")


def _ensure_clone_target(target: Path) -> None:
    if target.exists() and (not target.is_dir() or any(target.iterdir())):
        raise AlreadyExists(f"Target folder exists and is not empty: {target}")


def create_registry_project(
    *,
    project_location: Path,
    registry_name: str,
    framework: str,
    style: str,
    homepage: str,
    template_url: str,
) -> CreatedProject:
    """Clone the registry template into `project_location` and stamp it with this registry's identity."""
    registry_name = validate_registry_name(registry_name)
    validate_framework(framework)
    validate_style(style)

    target = project_location.resolve()
    _ensure_clone_target(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    run_command(
        ["git", "clone", template_url, str(target)],
        cwd=target.parent,
        description="Cloning registry template...",
    )

    styles_dir = target / "registry"
    template_style_dir = styles_dir / TEMPLATE_STYLE
    if style != TEMPLATE_STYLE and template_style_dir.exists():
        template_style_dir.rename(styles_dir / style)

    manifest_path(target).write_text(
        render_registry_manifest(registry_name=registry_name, homepage=homepage, style=style),
        encoding="utf-8",
    )
    write_registry_exports(target)

    page_path = target / "app" / "page.tsx"
    page_path.parent.mkdir(parents=True, exist_ok=True)
    page_path.write_text(load_page_template(), encoding="utf-8")

    return CreatedProject(target_path=target, registry_name=registry_name, style=style, homepage=homepage)


def install_dependencies(target: Path, *, package_manager: str) -> None:
    run_command([package_manager, "install"], cwd=target, description="Installing dependencies...")
