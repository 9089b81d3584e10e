import logging
import subprocess
import sys
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .config import settings
from .library import Library
from .outcomes import OperationResult
from .ui_helpers import print_item_list, print_user_list, set_output_mode

APP_NAME = settings.app_name

console = Console()
logger = logging.getLogger(__name__)


def _report(result: OperationResult, console: Console) -> None:
    if result.ok:
        console.print(f"[green]{escape(result.message)}[/]")
    else:
        console.print(f"[bold red]Error:[/] {escape(result.message)}")


def _ask(console: Console, question: str) -> str:
    return Prompt.ask(question, console=console).strip()


# ------------------------- Menu actions ------------------------- #
def view_items(library: Library, console: Console) -> None:
    print_item_list(library.get_items(), console)


def borrow_item(library: Library, console: Console) -> None:
    item_id = _ask(console, "Enter the ID of the item to borrow")
    _report(library.borrow_by_id(item_id), console)


def return_item(library: Library, console: Console) -> None:
    item_id = _ask(console, "Enter the ID of the item to return")
    _report(library.return_by_id(item_id), console)


def add_book(library: Library, console: Console) -> None:
    item_id = _ask(console, "Enter Book ID")
    title = _ask(console, "Enter Book Title")
    library.add_book(item_id, title)
    console.print("[green]Book added successfully.[/]")


def add_magazine(library: Library, console: Console) -> None:
    item_id = _ask(console, "Enter Magazine ID")
    issue = _ask(console, "Enter Magazine Issue")
    library.add_magazine(item_id, issue)
    console.print("[green]Magazine added successfully.[/]")


def add_user(library: Library, console: Console) -> None:
    name = _ask(console, "Enter User Name")
    kind = _ask(console, "Enter User Type (Faculty/Student/Guest)")
    _report(library.add_user(name, kind), console)


def view_users(library: Library, console: Console) -> None:
    print_user_list(library.get_users(), console)


def lend_item(library: Library, console: Console) -> None:
    name = _ask(console, "Enter User Name")
    item_id = _ask(console, "Enter the ID of the item to lend")
    _report(library.borrow_for_user(name, item_id), console)


def take_back_item(library: Library, console: Console) -> None:
    name = _ask(console, "Enter User Name")
    item_id = _ask(console, "Enter the ID of the item to take back")
    _report(library.return_for_user(name, item_id), console)


MENU_ITEMS = [
    ("1", "View library items", view_items),
    ("2", "Borrow item", borrow_item),
    ("3", "Return item", return_item),
    ("4", "Add book", add_book),
    ("5", "Add magazine", add_magazine),
    ("6", "Add user", add_user),
    ("7", "View users", view_users),
    ("8", "Lend item to user", lend_item),
    ("9", "Take item back from user", take_back_item),
]


def render_menu(console: Console) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, _ in MENU_ITEMS:
        table.add_row(f"[reverse]{key}[/]", label)
    table.add_row("[reverse]0[/]", "Exit")

    console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(1, 2)))


def run_menu(library: Library, console: Console = console) -> None:
    """Simple interactive menu for the library shell."""
    actions = {key: action for key, _, action in MENU_ITEMS}
    choices = [key for key, _, _ in MENU_ITEMS] + ["0"]

    while True:
        console.clear()
        render_menu(console)
        choice = Prompt.ask("Please choose an option", choices=choices, default="1", console=console).strip()
        if choice == "0":
            console.print("[green]Goodbye![/]")
            break
        actions[choice](library, console)
        console.print()


# --- Typer CLI Application ---
app = typer.Typer(help="Library inventory tracker")


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Listing format: plain | json | rich (default: plain)",
    ),
):
    """Global options for the CLI (e.g. output mode). Starts the menu when no command is given."""
    logging.basicConfig(level=settings.log_level)
    if output:
        set_output_mode(output)
    if ctx.invoked_subcommand is None:
        run_menu(Library(), console)


@app.command("menu")
def cli_menu():
    """Start the interactive library menu."""
    run_menu(Library(), console)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
):
    """Start the HTTP API with uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    console.print(f"Starting API on http://{host}:{port}/")
    logger.info(f"Launching uvicorn on {host}:{port}")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "library_tracker.api:create_app",
        "--factory",
        "--host", host,
        "--port", str(port),
    ]
    try:
        subprocess.run(args)
    except FileNotFoundError:
        console.print("[bold red]Error:[/] `uvicorn` could not be started. Make sure it is installed.")


if __name__ == "__main__":
    app()
