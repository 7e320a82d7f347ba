import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

from librlog import catalog
from librlog.book import BookRecord, CATALOG_FIELDS, CHECKOUT_FIELDS, FIELD_LABELS
from librlog.config import settings
from librlog.exceptions import (
    AlreadyCheckedOutError,
    AlreadyReturnedError,
    CatalogNotFoundError,
    DuplicateAccessionError,
    NotFoundError,
    ValidationError,
)
from librlog.search import NOT_FOUND, SearchField, iter_matches, search
from librlog.validators import FieldValidator, validate_fields

logger = logging.getLogger(__name__)


class Library:
    """Manages the in-memory catalog and its persistence to the catalog file."""

    def __init__(self, data_file: Optional[str] = None, today: Optional[Callable[[], date]] = None) -> None:
        self.data_file = data_file or settings.data_file
        self._today = today or date.today
        self.books: List[BookRecord] = []

    def __len__(self) -> int:
        return len(self.books)

    # ------------------------- Record store ------------------------- #
    def append(self, book: BookRecord) -> None:
        self.books.append(book)

    def remove_at(self, index: int) -> BookRecord:
        """Remove the record at ``index``; later records move down one place."""
        if not 0 <= index < len(self.books):
            raise IndexError(f"Record index {index} out of range.")
        return self.books.pop(index)

    def get_all(self) -> Tuple[BookRecord, ...]:
        return tuple(self.books)

    # ------------------------- Lookup ------------------------- #
    def find_index(self, accession_number: str) -> int:
        return search(self.books, SearchField.ACCESSION_NUMBER, accession_number)

    def find_book(self, accession_number: str) -> Optional[BookRecord]:
        index = self.find_index(accession_number)
        if index == NOT_FOUND:
            return None
        return self.books[index]

    def get_book(self, accession_number: str) -> BookRecord:
        book = self.find_book(accession_number)
        if book is None:
            raise NotFoundError(f"Book with accession number {accession_number.strip()} not found.")
        return book

    def accession_numbers(self) -> List[str]:
        return [b.accession_number for b in self.books]

    def next_accession_number(self) -> str:
        """Count-derived accession number, bumped past any number already in use."""
        taken = set(self.accession_numbers())
        candidate = len(self.books) + 1
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    # ------------------------- Core operations ------------------------- #
    def add_book(self, book: BookRecord) -> BookRecord:
        """Validate and append a new record. Blank accession numbers are auto-assigned."""
        errors = validate_fields({name: getattr(book, name) for name in CATALOG_FIELDS})
        if errors:
            field, reason = next(iter(errors.items()))
            raise ValidationError(f"{FIELD_LABELS[field]} {reason}.")

        if not book.accession_number:
            book.accession_number = self.next_accession_number()
        elif self.find_book(book.accession_number) is not None:
            raise DuplicateAccessionError(f"Book with accession number {book.accession_number} already exists.")

        for name in CHECKOUT_FIELDS:
            setattr(book, name, "")

        self.append(book)
        logger.info(f"Added book {book.accession_number}: {book.title}")
        return book

    def update_book(self, accession_number: str, /, **fields: Optional[str]) -> BookRecord:
        """Update catalog fields of a record. Blank or None values keep the old value."""
        unknown = [name for name in fields if name not in CATALOG_FIELDS]
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(unknown)}.")

        book = self.get_book(accession_number)
        changes = {name: value.strip() for name, value in fields.items() if value is not None and value.strip()}

        errors = validate_fields(changes, required=False)
        if errors:
            field, reason = next(iter(errors.items()))
            raise ValidationError(f"{FIELD_LABELS[field]} {reason}.")

        new_accession = changes.get("accession_number")
        if new_accession and new_accession != book.accession_number:
            ok, reason = FieldValidator.unique_accession(self.accession_numbers())(new_accession)
            if not ok:
                raise DuplicateAccessionError(f"Book with {reason}.")

        for name, value in changes.items():
            setattr(book, name, value)
        logger.info(f"Updated book {book.accession_number}: {', '.join(changes) or 'no changes'}")
        return book

    def remove_book(self, accession_number: str) -> BookRecord:
        index = self.find_index(accession_number)
        if index == NOT_FOUND:
            raise NotFoundError(f"Book with accession number {accession_number.strip()} not found.")
        book = self.remove_at(index)
        logger.info(f"Removed book {book.accession_number}: {book.title}")
        return book

    def borrow_book(self, accession_number: str, borrower: str, checkout_date: str = "") -> BookRecord:
        book = self.get_book(accession_number)
        if book.is_checked_out:
            raise AlreadyCheckedOutError(f"Book {book.accession_number} is already checked out by {book.checked_out_by}.")

        borrower = (borrower or "").strip()
        ok, reason = FieldValidator.check_all(borrower, (FieldValidator.not_blank, FieldValidator.not_too_long))
        if not ok:
            raise ValidationError(f"Borrower name {reason}.")

        book.checked_out_by = borrower
        book.checked_out_date = (checkout_date or "").strip() or self.today()
        book.return_date = ""
        logger.info(f"Book {book.accession_number} checked out by {borrower} on {book.checked_out_date}")
        return book

    def return_book(self, accession_number: str, return_date: str = "") -> BookRecord:
        book = self.get_book(accession_number)
        if not book.is_checked_out:
            raise AlreadyReturnedError(f"Book {book.accession_number} is already returned.")

        book.checked_out_by = ""
        book.checked_out_date = ""
        book.return_date = (return_date or "").strip() or self.today()
        logger.info(f"Book {book.accession_number} returned on {book.return_date}")
        return book

    def list_books(self) -> List[BookRecord]:
        return list(self.books)

    def find_books(self, field: SearchField, query: str) -> List[BookRecord]:
        return [self.books[i] for i in iter_matches(self.books, field, query)]

    def group_books(self, field: SearchField) -> Dict[str, List[BookRecord]]:
        """Group records by equality of ``field`` as search compares it, in first-seen order.

        Keys are the first spelling seen for each group. Accession numbers are
        grouped case-sensitively, every other field case-insensitively.
        """
        groups: Dict[str, List[BookRecord]] = {}
        spellings: Dict[str, str] = {}
        for book in self.books:
            value = getattr(book, field.value)
            folded = value if field is SearchField.ACCESSION_NUMBER else value.casefold()
            key = spellings.setdefault(folded, value)
            groups.setdefault(key, []).append(book)
        return groups

    def get_statistics(self) -> Dict[str, Any]:
        checked_out = sum(1 for b in self.books if b.is_checked_out)
        return {
            "total_books": len(self.books),
            "available": len(self.books) - checked_out,
            "checked_out": checked_out,
            "unique_authors": len({b.author.casefold() for b in self.books if b.author}),
        }

    def today(self) -> str:
        return self._today().strftime(settings.date_format)

    # ------------------------- Persistence ------------------------- #
    def load(self, missing_ok: bool = True) -> int:
        """Replace the in-memory catalog with the catalog file's contents."""
        try:
            books = catalog.load(self.data_file)
        except CatalogNotFoundError:
            if not missing_ok:
                raise
            logger.warning(f"Catalog file {self.data_file} not found; starting with an empty catalog")
            books = []
        self.books = books
        return len(self.books)

    def reload(self) -> int:
        return self.load(missing_ok=False)

    def save(self) -> int:
        return catalog.save(self.data_file, self.books)
