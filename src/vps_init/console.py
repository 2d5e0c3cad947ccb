"""Coloured terminal output."""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)


def print_section(title: str) -> None:
    console.print(f"\n[bold yellow]>>> {escape(title)}[/]")


def print_info(message: str) -> None:
    console.print(f"[blue]{escape(message)}[/]")


def print_success(message: str) -> None:
    console.print(f"[green]✅ {escape(message)}[/]")


def print_warning(message: str) -> None:
    console.print(f"[yellow]⚠️  {escape(message)}[/]")


def print_error(message: str) -> None:
    console.print(f"[bold red]\\[ERROR] {escape(message)}[/]")


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner while a long command runs; plain line when not a tty."""
    if not console.is_terminal:
        console.print(f"[cyan]{escape(message)}[/]")
        yield
        return
    with console.status(f"[cyan]{escape(message)}[/]"):
        yield
    console.print(f"[cyan]{escape(message)}[/] [green]✔[/]")
