"""Line-oriented terminal input.

Every interactive answer goes through ``read_line`` so that end of input is
reported the same way everywhere: as ``InputEOF``.
"""
import sys
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape

from librlog.exceptions import InputEOF, ValidationError
from librlog.search import SearchField
from librlog.validators import FieldValidator, Predicate

console = Console(soft_wrap=True)


def read_line(prompt: str = "", password: bool = False) -> str:
    """Print ``prompt`` and return one line of input without its line ending."""
    try:
        # getpass reads the controlling terminal, so only hide input on a real tty
        return console.input(escape(prompt), password=password and sys.stdin.isatty())
    except EOFError as e:
        raise InputEOF("end of input") from e


def ask(label: str, predicates: Iterable[Predicate] = (), default: Optional[str] = None) -> str:
    """Prompt until the answer passes every predicate.

    A blank answer returns ``default`` when one is given, unvalidated, so an
    edit can keep the current value.
    """
    predicates = tuple(predicates)
    prompt = f"{label} [{default}]: " if default is not None else f"{label}: "
    while True:
        answer = read_line(prompt).strip()
        if not answer and default is not None:
            return default
        ok, reason = FieldValidator.check_all(answer, predicates)
        if ok:
            return answer
        console.print(f"[red]Error:[/] {escape(label)} {escape(reason)}.")


def confirm(question: str, default: bool = False) -> bool:
    """Yes/no question; a blank answer returns ``default``."""
    hint = "Y/n" if default else "y/N"
    while True:
        answer = read_line(f"{question} [{hint}] ").strip().lower()
        if not answer:
            return default
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        console.print("[yellow]Please answer 'y' or 'n'.[/]")


def choose_field(prompt: str = "Field") -> SearchField:
    """Ask for a search field by name or unique prefix."""
    names = ", ".join(f.value for f in SearchField)
    answer = read_line(f"{prompt} ({names}): ")
    try:
        return SearchField.parse(answer)
    except ValueError as e:
        raise ValidationError(str(e)) from e
