from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from shadcn_registry.errors import ValidationError
from shadcn_registry.naming import STYLES

CONFIG_FILENAME = ".shadcn-registry.yaml"

DEFAULT_TEMPLATE_URL = "https://github.com/SpyC0der77/registry-template.git"
DEFAULT_REGISTRY_PORT = 3002
DEFAULT_READY_TIMEOUT_SECONDS = 60.0

PACKAGE_MANAGER_CHOICES: tuple[str, ...] = ("npm", "pnpm", "bun")

_ENV_TEMPLATE_URL = "SHADCN_REGISTRY_TEMPLATE_URL"
_ENV_PORT = "SHADCN_REGISTRY_PORT"
_ENV_READY_TIMEOUT = "SHADCN_REGISTRY_READY_TIMEOUT_SECONDS"


@dataclass(frozen=True)
class ToolConfig:
    template_url: str = DEFAULT_TEMPLATE_URL
    registry_port: int = DEFAULT_REGISTRY_PORT
    ready_timeout_seconds: float = DEFAULT_READY_TIMEOUT_SECONDS
    default_style: str | None = None
    default_package_manager: str | None = None
    source: Path | None = None


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValidationError(f"{path}: invalid YAML ({exc})") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"Expected mapping in {path}, got {type(data).__name__}")
    return data


def _require_str(data: dict[str, Any], key: str, *, where: Path) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{where}: {key} must be a non-empty string")
    return value.strip()


def _require_port(value: Any, *, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not (0 < value < 65536):
        raise ValidationError(f"{where}: registry_port must be an integer between 1 and 65535")
    return value


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if value <= 0:
        return None
    return value


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    if not (0 < value < 65536):
        return None
    return value


def config_from_mapping(data: dict[str, Any], *, where: Path) -> ToolConfig:
    cfg = ToolConfig(source=where)

    template_url = _require_str(data, "template_url", where=where)
    if template_url is not None:
        cfg = replace(cfg, template_url=template_url)

    if "registry_port" in data:
        cfg = replace(cfg, registry_port=_require_port(data["registry_port"], where=str(where)))

    if "ready_timeout_seconds" in data:
        timeout = data["ready_timeout_seconds"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ValidationError(f"{where}: ready_timeout_seconds must be a positive number")
        cfg = replace(cfg, ready_timeout_seconds=float(timeout))

    style = _require_str(data, "default_style", where=where)
    if style is not None:
        if style not in STYLES:
            raise ValidationError(f"{where}: default_style must be one of {', '.join(STYLES)}")
        cfg = replace(cfg, default_style=style)

    package_manager = _require_str(data, "default_package_manager", where=where)
    if package_manager is not None:
        if package_manager not in PACKAGE_MANAGER_CHOICES:
            raise ValidationError(
                f"{where}: default_package_manager must be one of {', '.join(PACKAGE_MANAGER_CHOICES)}"
            )
        cfg = replace(cfg, default_package_manager=package_manager)

    return cfg


def load_config(start_dir: Path | None = None) -> ToolConfig:
    """Read `.shadcn-registry.yaml` from `start_dir` (default: cwd), then apply environment overrides."""
    base = (start_dir or Path.cwd()).resolve()
    path = base / CONFIG_FILENAME
    cfg = config_from_mapping(_load_yaml(path), where=path) if path.is_file() else ToolConfig()

    template_url = os.environ.get(_ENV_TEMPLATE_URL)
    if template_url and template_url.strip():
        cfg = replace(cfg, template_url=template_url.strip())
    port = _env_int(_ENV_PORT)
    if port is not None:
        cfg = replace(cfg, registry_port=port)
    timeout = _env_float(_ENV_READY_TIMEOUT)
    if timeout is not None:
        cfg = replace(cfg, ready_timeout_seconds=timeout)
    return cfg
