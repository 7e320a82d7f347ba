"""Catalog file codec.

The catalog is a plain text file: a fixed header line followed by one line per
book, ten fields separated by commas. Values are written as-is, with no quoting
or escaping, so a value holding a comma or a line break corrupts the file when
it is read back. Such values are reported with a warning on save.
"""
import logging
import os
from pathlib import Path
from typing import Iterable, List, Union

from librlog.book import BookRecord, FIELD_NAMES, FIELDS
from librlog.exceptions import CatalogFormatError, CatalogIOError, CatalogNotFoundError

logger = logging.getLogger(__name__)

DELIMITER = ","
HEADER = DELIMITER.join(label for _, label in FIELDS)

# Older catalogs stored unset fields as a lone dash
LEGACY_UNSET = "-"

PathLike = Union[str, os.PathLike]


_LABELS = {label.lower() for _, label in FIELDS}


def _is_header(line: str) -> bool:
    """True when every field of ``line`` is a field label, ignoring case."""
    values = [v.strip().lower() for v in line.rstrip("\r\n").split(DELIMITER)]
    return values[0] == FIELDS[0][1].lower() and all(v in _LABELS for v in values)


def parse_line(line: str) -> BookRecord:
    """Parse one catalog line. Missing trailing fields stay empty."""
    values = line.rstrip("\r\n").split(DELIMITER)
    if len(values) > len(FIELD_NAMES):
        logger.debug(f"Ignoring {len(values) - len(FIELD_NAMES)} extra field(s) in line: {line!r}")
    data = {}
    for name, value in zip(FIELD_NAMES, values):
        value = value.strip()
        data[name] = "" if value == LEGACY_UNSET else value
    return BookRecord.from_dict(data)


def format_line(book: BookRecord) -> str:
    return DELIMITER.join(book.to_row())


def load(path: PathLike) -> List[BookRecord]:
    """Read every record from the catalog file at ``path``.

    The header line is optional, but when the first line looks like a header
    it must match ``HEADER`` exactly.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except FileNotFoundError as e:
        raise CatalogNotFoundError(f"'{path}': no such file") from e
    except OSError as e:
        raise CatalogIOError(f"'{path}': error reading file: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise CatalogIOError(f"'{path}': file is not valid UTF-8") from e

    books: List[BookRecord] = []
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            continue
        if lineno == 1 and _is_header(line):
            if line.rstrip("\r\n") != HEADER:
                raise CatalogFormatError(f"'{path}': unexpected header: {line.rstrip()!r}")
            continue
        books.append(parse_line(line))

    logger.info(f"Loaded {len(books)} record(s) from {path}")
    return books


def save(path: PathLike, books: Iterable[BookRecord]) -> int:
    """Write the header and every record to ``path``. Returns the record count."""
    books = list(books)
    for book in books:
        for name in FIELD_NAMES:
            value = getattr(book, name)
            if DELIMITER in value or "\n" in value or "\r" in value:
                logger.warning(
                    f"Record {book.accession_number!r}: {name} contains a delimiter or line break "
                    f"and will not read back correctly"
                )

    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(HEADER + "\n")
            for book in books:
                f.write(format_line(book) + "\n")
    except OSError as e:
        raise CatalogIOError(f"'{path}': error writing file: {e.strerror or e}") from e

    logger.info(f"Saved {len(books)} record(s) to {path}")
    return len(books)
