from __future__ import annotations


# Field order of a catalog line, paired with its header label
FIELDS = (
    ("title", "Title"),
    ("author", "Author"),
    ("publisher", "Publisher"),
    ("publication_year", "Publication Year"),
    ("isbn", "ISBN"),
    ("accession_number", "Accession Number"),
    ("genre", "Genre"),
    ("checked_out_by", "Checked Out By"),
    ("checked_out_date", "Checked Out Date"),
    ("return_date", "Return Date"),
)

FIELD_NAMES = tuple(name for name, _ in FIELDS)
FIELD_LABELS = dict(FIELDS)

# Fields entered through add/edit; the checkout fields belong to borrow/return
CATALOG_FIELDS = FIELD_NAMES[:7]
REQUIRED_FIELDS = ("title", "author", "publisher", "publication_year", "isbn")
CHECKOUT_FIELDS = ("checked_out_by", "checked_out_date", "return_date")


class BookRecord:
    """A single physical copy in the catalog."""

    def __init__(self, title: str = "", author: str = "", publisher: str = "",
                 publication_year: str = "", isbn: str = "", accession_number: str = "",
                 genre: str = "",
                 # Checkout state
                 checked_out_by: str = "", checked_out_date: str = "", return_date: str = "") -> None:
        self.title = title.strip()
        self.author = author.strip()
        self.publisher = publisher.strip()
        self.publication_year = publication_year.strip()
        self.isbn = isbn.strip()
        self.accession_number = accession_number.strip()
        self.genre = genre.strip()

        # Empty checked_out_by means the copy is on the shelf
        self.checked_out_by = checked_out_by.strip()
        self.checked_out_date = checked_out_date.strip()
        self.return_date = return_date.strip()

    @property
    def is_checked_out(self) -> bool:
        return self.checked_out_by != ""

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (Accession: {self.accession_number})"

    def __repr__(self) -> str:
        return f"BookRecord(accession_number={self.accession_number!r}, title={self.title!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in FIELD_NAMES}

    def to_row(self) -> list:
        return [getattr(self, name) for name in FIELD_NAMES]

    @staticmethod
    def from_dict(data: dict) -> "BookRecord":
        # Missing keys and None values both mean "unset"
        return BookRecord(**{name: data.get(name) or "" for name in FIELD_NAMES})
