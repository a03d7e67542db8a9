from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def eprint(message: str) -> None:
    err_console.print(escape(message))


def info(message: str) -> None:
    console.print(escape(message))


def warn(message: str) -> None:
    err_console.print(f"[yellow]WARNING:[/yellow] {escape(message)}")


def error(message: str) -> None:
    err_console.print(f"[red]ERROR:[/red] {escape(message)}")


def intro(title: str) -> None:
    console.print(f"[bold]{escape(title)}[/bold]")


def outro(message: str) -> None:
    console.print(f"[green]{escape(message)}[/green]")


def cancelled(message: str = "Operation cancelled.") -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


class TaskLog:
    """Progress log for one external command: a title, streamed lines, a final status."""

    def __init__(self, title: str) -> None:
        self.title = title
        self.lines: list[str] = []
        console.print(f"[cyan]>[/cyan] {escape(title)}")

    def message(self, line: str) -> None:
        self.lines.append(line)
        console.print(f"  [dim]{escape(line)}[/dim]")

    def success(self, message: str = "Done!") -> None:
        console.print(f"[green]  {escape(message)}[/green]")

    def failure(self, message: str = "Failed!") -> None:
        err_console.print(f"[red]  {escape(message)}[/red]")
