import os
import json
from typing import Any, Dict, List, Sequence
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel

from librlog.book import FIELDS

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

# Width of the widest label plus the colon, for the plain record layout
_LABEL_WIDTH = max(len(label) for _, label in FIELDS) + 2

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def format_record(book: Any) -> List[str]:
    """One 'Label:  value' line per field, labels padded to a common width."""
    return [(label + ":").ljust(_LABEL_WIDTH) + getattr(book, name, "") for name, label in FIELDS]

def print_record(book: Any, title: str = "Book") -> None:
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        body = "\n".join(f"[bold]{label}:[/] {escape(getattr(book, name, ''))}" for name, label in FIELDS)
        _console.print(Panel.fit(body, title=escape(title), border_style="green"))
    else:
        for line in format_record(book):
            print(line)

def _records_table(books: Sequence[Any], title: str) -> Table:
    table = Table(title=title, show_lines=True, header_style="bold cyan")
    table.add_column("Accession", style="magenta", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Author", style="white")
    table.add_column("Year", style="white")
    table.add_column("Genre", style="white")
    table.add_column("Checked Out By", style="yellow")
    for b in books:
        table.add_row(*(escape(v) for v in (b.accession_number, b.title, b.author,
                                             b.publication_year, b.genre, b.checked_out_by)))
    return table

def print_list_result(books: Sequence[Any], empty_message: str = "No books in catalog.") -> None:
    """Print records in the current output mode.
    - plain: every field of every record, records separated by a blank line
    - json: JSON array of records
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print(empty_message)
        return

    if mode == "rich":
        _console.print(_records_table(books, "📚 Catalog"))
        _console.print(f"[dim]{len(books)} record(s)[/]")
    else:
        for i, b in enumerate(books):
            if i:
                print()
            for line in format_record(b):
                print(line)

def print_groups_result(groups: Dict[str, List[Any]], field_label: str) -> None:
    mode = get_output_mode()

    if mode == "json":
        payload = [{"value": key, "books": [b.to_dict() for b in books]} for key, books in groups.items()]
        print(json.dumps(payload, ensure_ascii=False))
        return

    if not groups:
        print("No books in catalog.")
        return

    for key, books in groups.items():
        heading = f"{field_label}: {key or '(blank)'} ({len(books)})"
        if mode == "rich":
            _console.print(_records_table(books, escape(heading)))
        else:
            print(f"== {heading} ==")
            for b in books:
                print(f"  {b.accession_number} - {b.title} by {b.author}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics in the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    if mode == "json":
        print(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (f"[bold]Total Books:[/] {stats['total_books']}\n"
                   f"[bold]Available:[/] {stats['available']}\n"
                   f"[bold]Checked Out:[/] {stats['checked_out']}\n"
                   f"[bold]Unique Authors:[/] {stats['unique_authors']}")
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {stats['total_books']}")
        print(f"Available: {stats['available']}")
        print(f"Checked Out: {stats['checked_out']}")
        print(f"Unique Authors: {stats['unique_authors']}")
