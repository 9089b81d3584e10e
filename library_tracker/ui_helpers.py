import os
import json
from typing import List, Optional
from rich.console import Console
from rich.table import Table

from .config import settings
from .items import LibraryItem
from .users import LibraryUser

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()
    return mode if mode in OUTPUT_MODES else "plain"


def print_item_list(items: List[LibraryItem], console: Optional[Console] = None) -> None:
    """Print catalog items according to the current output mode.
    - plain: one display line per item, or 'No items in the library.'
    - json: JSON array of item payloads
    - rich: Rich table
    """
    console = console or Console()
    mode = get_output_mode()

    if not items:
        console.print("No items in the library.")
        return

    if mode == "json":
        console.print_json(json.dumps([item.to_dict() for item in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Library Items", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Kind", style="white")
        table.add_column("Title / Issue", style="white")
        table.add_column("Available", style="white")
        table.add_column("Due Date", style="white")
        for item in items:
            label = getattr(item, "title", None) or getattr(item, "issue", "")
            due = item.due_date.isoformat() if item.due_date else "-"
            table.add_row(item.item_id, item.kind, label, "yes" if item.available else "no", due)
        console.print(table)
    else:
        for item in items:
            console.print(item.display(), markup=False, highlight=False, soft_wrap=True)


def print_user_list(users: List[LibraryUser], console: Optional[Console] = None) -> None:
    """Print registered users according to the current output mode."""
    console = console or Console()
    mode = get_output_mode()

    if not users:
        console.print("No users registered.")
        return

    if mode == "json":
        payload = [
            {
                "name": user.name,
                "kind": user.kind.value,
                "borrowed": user.get_borrowed_item_count(),
                "limit": user.get_borrowing_limit(),
                "items": [item.item_id for item in user.borrowed_items],
            }
            for user in users
        ]
        console.print_json(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Users", show_lines=True, header_style="bold cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Kind", style="white")
        table.add_column("Borrowed", style="white")
        table.add_column("Items", style="white")
        for user in users:
            held = ", ".join(item.item_id for item in user.borrowed_items) or "-"
            table.add_row(user.name, user.kind.value, f"{user.get_borrowed_item_count()}/{user.get_borrowing_limit()}", held)
        console.print(table)
    else:
        for user in users:
            console.print(str(user), markup=False, highlight=False, soft_wrap=True)
