from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from rich.markup import escape
from rich.prompt import Prompt

from shadcn_registry.console import console, warn
from shadcn_registry.errors import PromptCancelled


@dataclass(frozen=True)
class Option:
    value: str
    label: str
    disabled: bool = False
    hint: str | None = None


def _ask(message: str, *, default: str | None = None) -> str:
    try:
        if default is None:
            answer = Prompt.ask(message, console=console)
        else:
            answer = Prompt.ask(message, console=console, default=default)
    except (KeyboardInterrupt, EOFError):
        raise PromptCancelled() from None
    return (answer or "").strip()


def ask_text(
    message: str,
    *,
    default: str | None = None,
    validate: Callable[[str], str | None] | None = None,
) -> str:
    """Ask until `validate` (returning an error message or None) accepts the answer."""
    while True:
        answer = _ask(message, default=default)
        problem = validate(answer) if validate is not None else None
        if problem is None:
            return answer
        warn(problem)


def ask_select(message: str, options: Sequence[Option], *, default: str | None = None) -> str:
    """Numbered single choice. Disabled options are listed with their hint but cannot be picked."""
    enabled = [o for o in options if not o.disabled]
    if not enabled:
        raise ValueError(f"No selectable options for prompt: {message}")

    console.print(escape(message))
    numbered: dict[str, Option] = {}
    for index, option in enumerate(options, start=1):
        if option.disabled:
            suffix = f" ({option.hint})" if option.hint else " (unavailable)"
            console.print(f"  [dim]-  {escape(option.label + suffix)}[/dim]")
            continue
        numbered[str(index)] = option
        console.print(f"  {index}. {escape(option.label)}")

    default_key: str | None = None
    for key, option in numbered.items():
        if option.value == (default or enabled[0].value):
            default_key = key

    while True:
        answer = _ask("Choice", default=default_key)
        if answer in numbered:
            return numbered[answer].value
        for option in enabled:
            if answer == option.value:
                return option.value
        warn(f"Pick one of: {', '.join(numbered)}")


def ask_confirm(message: str, *, default: bool = True) -> bool:
    choice = ask_select(
        message,
        [Option("yes", "Yes"), Option("no", "No")],
        default="yes" if default else "no",
    )
    return choice == "yes"
