from __future__ import annotations

import re

from shadcn_registry.errors import ValidationError

STYLES: tuple[str, ...] = ("new-york", "default")
KINDS: tuple[str, ...] = ("component", "hook", "block")

_KEBAB_RE = re.compile(r"^[a-z][a-z0-9-]*[a-z0-9]?$")
_HOOK_RE = re.compile(r"^use-[a-z][a-z0-9-]*[a-z0-9]?$")

_EXAMPLES = {
    "component": "my-component",
    "hook": "use-my-hook",
    "block": "my-block",
}


def to_pascal_case(name: str) -> str:
    """`my-block` -> `MyBlock`."""
    return "".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


def to_hook_function_name(name: str) -> str:
    """`use-my-hook` -> `useMyHook`."""
    first, *rest = name.split("-")
    return first + "".join(part[:1].upper() + part[1:].lower() for part in rest)


def name_error(kind: str, value: str) -> str | None:
    """Return a human-readable problem with `value` as a `kind` name, or None when it is valid."""
    if kind not in KINDS:
        raise ValueError(f"Unknown item kind: {kind!r}")
    if not value:
        return f"{kind.capitalize()} name is required!"
    if kind == "hook":
        if not _HOOK_RE.match(value):
            return f"Use use-<name> format (e.g. {_EXAMPLES['hook']})"
        return None
    if not _KEBAB_RE.match(value):
        return f"Use kebab-case (e.g. {_EXAMPLES[kind]})"
    return None


def validate_item_name(kind: str, value: str) -> str:
    problem = name_error(kind, value)
    if problem is not None:
        raise ValidationError(problem)
    return value


def validate_style(value: str) -> str:
    if value not in STYLES:
        raise ValidationError(f'--style must be "new-york" or "default" (got {value!r})')
    return value
