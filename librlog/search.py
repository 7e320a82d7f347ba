from enum import Enum
from typing import Iterator, Sequence

from librlog.book import BookRecord

# Returned by search() when nothing matches; never a valid index
NOT_FOUND = -1


class SearchField(str, Enum):
    TITLE = "title"
    AUTHOR = "author"
    PUBLISHER = "publisher"
    PUBLICATION_YEAR = "publication_year"
    ACCESSION_NUMBER = "accession_number"
    GENRE = "genre"

    @classmethod
    def parse(cls, raw: str) -> "SearchField":
        """Accept a field name, its value, or a unique prefix ('pub' is ambiguous)."""
        key = (raw or "").strip().lower().replace(" ", "_").replace("-", "_")
        if not key:
            raise ValueError("Search field cannot be empty.")
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        candidates = [m for m in cls if m.value.startswith(key)]
        if len(candidates) == 1:
            return candidates[0]
        raise ValueError(f"Unknown search field: {raw!r}")


def matches(book: BookRecord, field: SearchField, query: str) -> bool:
    value = getattr(book, field.value).strip()
    query = query.strip()
    if field is SearchField.ACCESSION_NUMBER:
        return value == query
    return value.casefold() == query.casefold()


def iter_matches(books: Sequence[BookRecord], field: SearchField, query: str,
                 start_index: int = 0) -> Iterator[int]:
    """Yield the index of every record at or after ``start_index`` whose field matches."""
    for index in range(max(start_index, 0), len(books)):
        if matches(books[index], field, query):
            yield index


def search(books: Sequence[BookRecord], field: SearchField, query: str, start_index: int = 0) -> int:
    """Index of the first match at or after ``start_index``, or NOT_FOUND."""
    return next(iter_matches(books, field, query, start_index), NOT_FOUND)
