import logging
from typing import Callable, Dict, Optional

import typer
from rich.console import Console
from rich.markup import escape

from librlog.book import BookRecord, CATALOG_FIELDS, FIELD_LABELS
from librlog.config import settings
from librlog.exceptions import (
    AlreadyCheckedOutError,
    AlreadyReturnedError,
    CatalogError,
    InputEOF,
    NotFoundError,
    ValidationError,
)
from librlog.library import Library
from librlog.prompts import ask, choose_field, confirm, read_line
from librlog.search import SearchField
from librlog.ui_helpers import (
    print_groups_result,
    print_list_result,
    print_record,
    print_stats_result,
    set_output_mode,
)
from librlog.validators import FieldValidator, predicates_for

console = Console(soft_wrap=True)

PROMPT = ">>> "

HELP_TEXT = """\
Type [?]: [a]dd_book, [b]orrow_book, [d]elete_book, [e]dit_book,
          [f]ind_books, [g]roup_books, [l]ist_books, [r]eturn_book,
          load_[c]atalog, [s]ave_catalog, [p]rint_info, s[t]atistics,
          [v]ersion, [w]arranty, [h]elp, [q]uit."""

WARRANTY_TEXT = """\
This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details."""


def _error(message: str) -> None:
    console.print(f"[bold red]Error:[/] {escape(message)}")


def _accession(prompt: str = "Accession number") -> str:
    return ask(prompt, (FieldValidator.not_blank,))


# --------------------------- Startup --------------------------- #
def prog_ver() -> None:
    print(f"{settings.app_name} {settings.app_version}")
    print("Copyright 2023 Francis John Baldon")
    print("This is free software with ABSOLUTELY NO WARRANTY.")
    print("For help type 'h'.")


def verify_user(password: Optional[str] = None) -> bool:
    """Password prompt loop. False when input ends before a match."""
    expected = settings.password if password is None else password
    while True:
        try:
            answer = read_line("Password: ", password=True)
        except InputEOF:
            print()
            _error("end of input before a valid password was entered.")
            return False
        if answer == expected:
            return True
        _error("incorrect password.")


# --------------------------- Command handlers --------------------------- #
def add(lib: Library) -> BookRecord:
    """Prompt for every catalog field and add the new record."""
    values = {}
    for name in CATALOG_FIELDS:
        if name == "accession_number":
            predicates = (FieldValidator.not_too_long, FieldValidator.unique_accession(lib.accession_numbers()))
            values[name] = ask(f"{FIELD_LABELS[name]} (blank = auto)", predicates)
        else:
            values[name] = ask(FIELD_LABELS[name], predicates_for(name))
    book = lib.add_book(BookRecord.from_dict(values))
    console.print(f"[green]Added:[/] {escape(book.title)} (accession number {escape(book.accession_number)})")
    return book


def edit(lib: Library) -> BookRecord:
    """Re-prompt each catalog field; a blank answer keeps the current value."""
    book = lib.get_book(_accession())
    others = [a for a in lib.accession_numbers() if a != book.accession_number]
    values = {}
    for name in CATALOG_FIELDS:
        predicates = [FieldValidator.not_too_long]
        if name == "accession_number":
            predicates.append(FieldValidator.unique_accession(others))
        values[name] = ask(FIELD_LABELS[name], predicates, default=getattr(book, name))
    book = lib.update_book(book.accession_number, **values)
    console.print(f"[green]Updated:[/] {escape(book.title)}")
    return book


def delete(lib: Library) -> None:
    book = lib.get_book(_accession())
    print_record(book, title="Book to delete")
    if confirm("Delete this book?", default=False):
        lib.remove_book(book.accession_number)
        console.print(f"[green]Deleted:[/] {escape(book.title)}")
    else:
        console.print("[blue]Delete cancelled.[/]")


def borrow(lib: Library) -> BookRecord:
    book = lib.get_book(_accession())
    if book.is_checked_out:
        raise AlreadyCheckedOutError(f"Book {book.accession_number} is already checked out by {book.checked_out_by}.")
    borrower = ask("Borrower name", (FieldValidator.not_blank, FieldValidator.not_too_long))
    checkout_date = ask("Checkout date (blank = today)", (FieldValidator.not_too_long,))
    book = lib.borrow_book(book.accession_number, borrower, checkout_date)
    console.print(f"[green]Checked out:[/] {escape(book.title)} to {escape(book.checked_out_by)} "
                  f"on {escape(book.checked_out_date)}")
    return book


def return_(lib: Library) -> BookRecord:
    book = lib.get_book(_accession())
    if not book.is_checked_out:
        raise AlreadyReturnedError(f"Book {book.accession_number} is already returned.")
    return_date = ask("Return date (blank = today)", (FieldValidator.not_too_long,))
    book = lib.return_book(book.accession_number, return_date)
    console.print(f"[green]Returned:[/] {escape(book.title)} on {escape(book.return_date)}")
    return book


def find(lib: Library) -> None:
    field = choose_field("Search by")
    query = ask("Search for", (FieldValidator.not_blank,))
    books = lib.find_books(field, query)
    if not books:
        raise NotFoundError(f"No book with {FIELD_LABELS[field.value].lower()} '{query}'.")
    print_list_result(books)


def group(lib: Library) -> None:
    field = choose_field("Group by")
    print_groups_result(lib.group_books(field), FIELD_LABELS[field.value])


def list_books(lib: Library) -> None:
    print_list_result(lib.list_books())


def load_catalog(lib: Library) -> None:
    if lib.books and not confirm("Discard unsaved changes and reload the catalog?", default=False):
        return
    count = lib.reload()
    console.print(f"Library catalog loaded successfully ({count} record(s)).")


def save_catalog(lib: Library) -> None:
    count = lib.save()
    console.print(f"Library catalog saved ({count} record(s)).")


def stats(lib: Library) -> None:
    print_stats_result(lib.get_statistics())


COMMANDS: Dict[str, Callable[[Library], Optional[BookRecord]]] = {
    "a": add,
    "b": borrow,
    "c": load_catalog,
    "d": delete,
    "e": edit,
    "f": find,
    "g": group,
    "l": list_books,
    "r": return_,
    "s": save_catalog,
    "t": stats,
}


def run_menu(lib: Library) -> None:
    """Command loop. Returns on 'q' or end of input."""
    last_book: Optional[BookRecord] = None
    while True:
        try:
            line = read_line(PROMPT).strip()
        except InputEOF:
            print()
            break
        if not line:
            continue

        choice = line[0].lower()
        if choice == "q":
            break
        elif choice == "h":
            print(HELP_TEXT)
        elif choice == "v":
            prog_ver()
        elif choice == "w":
            print(WARRANTY_TEXT)
        elif choice == "p":
            if last_book is None:
                print("No book added or edited yet.")
            else:
                print_record(last_book)
        elif choice in COMMANDS:
            try:
                result = COMMANDS[choice](lib)
            except InputEOF:
                print()
                break
            except (ValidationError, NotFoundError, CatalogError) as e:
                _error(str(e))
                continue
            if isinstance(result, BookRecord) and choice in ("a", "e"):
                last_book = result
        else:
            _error(f"'{choice}': invalid input. Type 'h' for help.")
    print("Exited.")


def run_session(lib: Library) -> int:
    """Banner, access gate, load, command loop, save. Returns the exit code."""
    prog_ver()
    if not verify_user():
        return 1
    try:
        count = lib.load()
    except CatalogError as e:
        _error(str(e))
        return 1
    console.print(f"[dim]{count} record(s) loaded from {escape(str(lib.data_file))}[/]")

    run_menu(lib)

    try:
        lib.save()
    except CatalogError as e:
        _error(str(e))
        return 1
    return 0


# --- Typer CLI Application ---
app = typer.Typer(help="Library catalog manager")


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    data_file: Optional[str] = typer.Option(
        None,
        "--data-file",
        "-d",
        help="Catalog file (default: data/library_catalog.csv or LIBRLOG_DATA_FILE)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Run the interactive catalog session, or a single command."""
    if output:
        set_output_mode(output)
    ctx.obj = Library(data_file)
    if ctx.invoked_subcommand is None:
        raise typer.Exit(run_session(ctx.obj))


def _load_or_exit(lib: Library) -> None:
    try:
        lib.load()
    except CatalogError as e:
        _error(str(e))
        raise typer.Exit(1)


@app.command("list")
def cli_list(ctx: typer.Context):
    """List every book in the catalog."""
    lib: Library = ctx.obj
    _load_or_exit(lib)
    print_list_result(lib.list_books())


@app.command("find")
def cli_find(
    ctx: typer.Context,
    field: str = typer.Argument(..., help="title, author, publisher, publication_year, accession_number or genre"),
    query: str = typer.Argument(..., help="Exact value to match"),
):
    """Find books whose field equals the query."""
    lib: Library = ctx.obj
    try:
        search_field = SearchField.parse(field)
    except ValueError as e:
        _error(str(e))
        raise typer.Exit(1)
    _load_or_exit(lib)
    print_list_result(lib.find_books(search_field, query), empty_message=f"No book with {field} '{query}'.")


def run() -> None:
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
    )
    app()


if __name__ == "__main__":
    run()
