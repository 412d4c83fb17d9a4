from rich.console import Console
from rich.markup import escape
import os

console = Console()
err_console = Console(stderr=True)


def is_minimal() -> bool:
    env = os.environ.get('SIMDMCA_MINIMAL_UI')
    if env is None:
        return False
    return env.strip().lower() in ('1', 'true', 'yes', 'on')


def print_stage(step: int, total: int, message: str):
    if is_minimal():
        err_console.print(f"[{step}/{total}] {message}", markup=False)
    else:
        err_console.print(f"[cyan]●[/cyan] [bold]{step}/{total}[/bold] {escape(message)}")


def print_info(message: str):
    if is_minimal():
        return
    err_console.print(f"[yellow]Info:[/yellow] {escape(message)}")


def print_error(message: str):
    if is_minimal():
        err_console.print(f"[ERROR] {message}", markup=False)
        return
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def print_warning(message: str):
    if is_minimal():
        err_console.print(f"[WARN] {message}", markup=False)
        return
    err_console.print(f"[#9b59b6]Warning:[/#9b59b6] {escape(message)}")


def print_success(message: str):
    if is_minimal():
        console.print(f"[OK] {message}", markup=False)
        return
    console.print(f"[green]Success:[/green] {escape(message)}")


def print_block(title: str, text: str):
    """Verbatim multi-line output (tool diagnostics, assembly, reports)"""
    if is_minimal():
        console.print(f"--- {title} ---", markup=False)
        console.print(text, markup=False, highlight=False)
        return
    console.rule(f"[bold]{escape(title)}[/bold]")
    console.print(text, markup=False, highlight=False)
