from __future__ import annotations

import argparse
import sys
from pathlib import Path

from shadcn_registry import __version__
from shadcn_registry.catalog import add_item, remove_item, removable_names
from shadcn_registry.config import PACKAGE_MANAGER_CHOICES, ToolConfig, load_config
from shadcn_registry.console import cancelled, error, info, intro, outro
from shadcn_registry.e2e import app_folder_error, create_test_app, get_package_manager
from shadcn_registry.errors import NotFound, PromptCancelled, RegistryError
from shadcn_registry.exports import write_registry_exports
from shadcn_registry.manifest import MANIFEST_FILENAME, has_manifest
from shadcn_registry.naming import STYLES, name_error, validate_item_name, validate_style
from shadcn_registry.project import (
    FRAMEWORKS,
    create_registry_project,
    install_dependencies,
    validate_framework,
    validate_registry_name,
)
from shadcn_registry.prompts import Option, ask_confirm, ask_select, ask_text

_STYLE_LABELS = {"new-york": "New York", "default": "Default"}

_NAME_PROMPTS = {
    "component": "Component name (kebab-case, e.g. my-component)?",
    "hook": "Hook name (use-<name>, e.g. use-my-hook)?",
    "block": "Block name (kebab-case, e.g. my-block)?",
}

_REMOVE_PROMPTS = {
    "component": "Which component to remove?",
    "hook": "Which hook to remove?",
    "block": "Which block to remove?",
}


def _registry_folder_error(value: str) -> str | None:
    if not has_manifest(Path(value).resolve()):
        return f"{MANIFEST_FILENAME} not found in that folder"
    return None


def _resolve_registry_folder(args: argparse.Namespace, *, message: str = "Folder containing the registry?") -> Path:
    if args.registry_folder is not None:
        root = Path(args.registry_folder).resolve()
        if not has_manifest(root):
            raise NotFound(f"{MANIFEST_FILENAME} not found in {root}")
        return root
    return Path(ask_text(message, default=".", validate=_registry_folder_error)).resolve()


def _resolve_style(args: argparse.Namespace, cfg: ToolConfig, *, message: str = "Which style?") -> str:
    if args.style is not None:
        return validate_style(args.style)
    if cfg.default_style is not None:
        return cfg.default_style
    return ask_select(message, [Option(s, _STYLE_LABELS[s]) for s in STYLES])


def _resolve_package_manager(args: argparse.Namespace, cfg: ToolConfig, *, message: str) -> str:
    if args.package_manager is not None:
        return get_package_manager(args.package_manager).name
    if cfg.default_package_manager is not None:
        return cfg.default_package_manager
    return ask_select(message, [Option(pm, pm) for pm in PACKAGE_MANAGER_CHOICES])


def _resolve_item_name(kind: str, value: str | None) -> str:
    if value is not None:
        return validate_item_name(kind, value)
    return ask_text(_NAME_PROMPTS[kind], validate=lambda v: name_error(kind, v))


def _added_message(kind: str, name: str, style: str, written: list[str]) -> str:
    if kind == "block":
        where = f"registry/{style}/blocks/{name}/"
        return f"Added block {name} at {where}. Run `registry:build` to rebuild."
    return f"Added {name} at {written[0]}. Run `registry:build` to rebuild."


def _cmd_add(args: argparse.Namespace, kind: str) -> int:
    cfg = load_config()
    intro(f"add-{kind} - Add a {kind} to your registry")
    root = _resolve_registry_folder(args)
    name = _resolve_item_name(kind, args.name)
    style = _resolve_style(args, cfg)

    result = add_item(root, kind=kind, name=name, style=style, dependencies=args.dependencies)
    write_registry_exports(root)
    outro(_added_message(kind, name, style, result.written))
    return 0


def _cmd_remove(args: argparse.Namespace, kind: str) -> int:
    intro(f"remove-{kind} - Remove a {kind} from your registry")
    root = _resolve_registry_folder(args)
    names = removable_names(root, kind)
    name = args.name
    if name is None:
        name = ask_select(_REMOVE_PROMPTS[kind], [Option(n, n) for n in names])

    result = remove_item(root, kind=kind, name=name)
    write_registry_exports(root)
    outro(f"Removed {result.item['name']}. Run `registry:build` to rebuild.")
    return 0


def cmd_add_component(args: argparse.Namespace) -> int:
    return _cmd_add(args, "component")


def cmd_add_hook(args: argparse.Namespace) -> int:
    return _cmd_add(args, "hook")


def cmd_add_block(args: argparse.Namespace) -> int:
    return _cmd_add(args, "block")


def cmd_remove_component(args: argparse.Namespace) -> int:
    return _cmd_remove(args, "component")


def cmd_remove_hook(args: argparse.Namespace) -> int:
    return _cmd_remove(args, "hook")


def cmd_remove_block(args: argparse.Namespace) -> int:
    return _cmd_remove(args, "block")


def cmd_generate_exports(args: argparse.Namespace) -> int:
    root = _resolve_registry_folder(args)
    path = write_registry_exports(root)
    info(f"Wrote {path}")
    return 0


def cmd_create_test_app(args: argparse.Namespace) -> int:
    cfg = load_config()
    intro("create-shadcn-registry - E2E Test")
    registry_folder = _resolve_registry_folder(args, message="Folder with the registry?")

    if args.app_folder is not None:
        app_folder = Path(args.app_folder)
    else:
        app_folder = Path(
            ask_text(
                "Folder to create the Next app in?",
                default="./test-app",
                validate=lambda v: app_folder_error(Path(v).resolve()),
            )
        )
    package_manager = _resolve_package_manager(args, cfg, message="Package manager?")
    port = args.port if args.port is not None else cfg.registry_port

    result = create_test_app(
        registry_folder=registry_folder,
        app_folder=app_folder,
        package_manager=package_manager,
        port=port,
        ready_timeout_seconds=cfg.ready_timeout_seconds,
    )
    outro(f"Done! App created at {result.app_path}.")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    cfg = load_config()
    intro("create-shadcn-registry")

    if args.registry_name is not None:
        registry_name = validate_registry_name(args.registry_name)
    else:
        registry_name = ask_text(
            "What should we call your registry? (e.g. my-registry)",
            validate=lambda v: None if v else "Registry name is required!",
        )

    if args.project_location is not None:
        project_location = args.project_location
    else:
        project_location = ask_text("Where should we create the registry?", default=".")

    if args.framework is not None:
        framework = validate_framework(args.framework)
    else:
        framework = ask_select(
            "Which framework are you using?",
            [Option(f.value, f.label, disabled=not f.implemented, hint="Not implemented") for f in FRAMEWORKS],
        )

    style = _resolve_style(args, cfg, message="What style do you want?")

    if args.homepage is not None:
        homepage = args.homepage
    else:
        homepage = ask_text("Where will this registry be hosted?", default="https://example.com")

    template_url = args.template_url or cfg.template_url
    created = create_registry_project(
        project_location=Path(project_location),
        registry_name=registry_name,
        framework=framework,
        style=style,
        homepage=homepage,
        template_url=template_url,
    )

    install = args.install
    if install is None:
        install = ask_confirm("Do you want to install dependencies?")
    if install:
        package_manager = _resolve_package_manager(
            args, cfg, message="Which package manager do you want to use?"
        )
        install_dependencies(created.target_path, package_manager=package_manager)

    outro(f"You're all set! Registry: {created.registry_name}, Style: {created.style}")
    return 0


def cmd_help(args: argparse.Namespace) -> int:
    build_parser().print_help()
    return 0


def _add_registry_folder(p: argparse.ArgumentParser) -> None:
    p.add_argument("--registry-folder", help=f"Folder containing {MANIFEST_FILENAME} (prompted when omitted).")


def _add_style(p: argparse.ArgumentParser) -> None:
    p.add_argument("--style", help=f"Registry style: {', '.join(STYLES)}.")


def _add_package_manager(p: argparse.ArgumentParser) -> None:
    p.add_argument("--package-manager", help=f"One of: {', '.join(PACKAGE_MANAGER_CHOICES)}.")


def _add_create_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--registry-name", help="Registry name written to registry.json.")
    p.add_argument("--project-location", help="Folder to clone the registry template into.")
    p.add_argument("--framework", help="Target framework (only `next` is implemented).")
    _add_style(p)
    p.add_argument("--homepage", help="URL where the registry will be hosted.")
    _add_package_manager(p)
    p.add_argument(
        "--install",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Install dependencies in the new project (prompted when omitted).",
    )
    p.add_argument("--template-url", help="Git URL of the registry template (overrides config).")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-shadcn-registry",
        description="Scaffold a shadcn registry and manage its components, hooks and blocks.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_create_options(parser)
    parser.set_defaults(func=cmd_create)
    sub = parser.add_subparsers(dest="cmd")

    p_add_component = sub.add_parser("add-component", help="Add a UI component to the registry.")
    _add_registry_folder(p_add_component)
    p_add_component.add_argument("--component-name", "--component", dest="name", help="kebab-case name.")
    _add_style(p_add_component)
    p_add_component.add_argument(
        "--dependencies", help="Comma-separated npm dependencies added to the defaults."
    )
    p_add_component.set_defaults(func=cmd_add_component)

    p_add_hook = sub.add_parser("add-hook", help="Add a hook to the registry.")
    _add_registry_folder(p_add_hook)
    p_add_hook.add_argument("--hook-name", "--hook", dest="name", help="use-<name> format.")
    _add_style(p_add_hook)
    p_add_hook.add_argument("--dependencies", help="Comma-separated npm dependencies.")
    p_add_hook.set_defaults(func=cmd_add_hook)

    p_add_block = sub.add_parser("add-block", help="Add a block (component + hook) to the registry.")
    _add_registry_folder(p_add_block)
    p_add_block.add_argument("--block-name", "--block", dest="name", help="kebab-case name.")
    _add_style(p_add_block)
    p_add_block.add_argument("--dependencies", help="Comma-separated npm dependencies.")
    p_add_block.set_defaults(func=cmd_add_block)

    p_rm_component = sub.add_parser("remove-component", help="Remove a UI component from the registry.")
    _add_registry_folder(p_rm_component)
    p_rm_component.add_argument("--component-name", "--component", dest="name")
    p_rm_component.set_defaults(func=cmd_remove_component)

    p_rm_hook = sub.add_parser("remove-hook", help="Remove a hook from the registry.")
    _add_registry_folder(p_rm_hook)
    p_rm_hook.add_argument("--hook-name", "--hook", dest="name")
    p_rm_hook.set_defaults(func=cmd_remove_hook)

    p_rm_block = sub.add_parser("remove-block", help="Remove a block and its folder from the registry.")
    _add_registry_folder(p_rm_block)
    p_rm_block.add_argument("--block-name", "--block", dest="name")
    p_rm_block.set_defaults(func=cmd_remove_block)

    p_test = sub.add_parser(
        "create-test-app",
        help="Serve the registry, create a Next.js app and install every registry item into it.",
    )
    _add_registry_folder(p_test)
    p_test.add_argument("--app-folder", help="Empty or missing folder for the consumer app.")
    _add_package_manager(p_test)
    p_test.add_argument("--port", type=int, help="Port for the registry dev server (overrides config).")
    p_test.set_defaults(func=cmd_create_test_app)

    p_exports = sub.add_parser("generate-exports", help="Regenerate registry/exports.ts from registry.json.")
    _add_registry_folder(p_exports)
    p_exports.set_defaults(func=cmd_generate_exports)

    p_help = sub.add_parser("help", help="Show this help and exit.")
    p_help.set_defaults(func=cmd_help)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return int(args.func(args))
    except PromptCancelled:
        cancelled()
        return 0
    except RegistryError as exc:
        error(str(exc))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
