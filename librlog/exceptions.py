class LibraryError(Exception):
    """Base exception for catalog errors."""


class ValidationError(LibraryError, ValueError):
    """A field value or menu choice was rejected."""


class DuplicateAccessionError(ValidationError):
    """Another record already holds the accession number."""


class AlreadyCheckedOutError(ValidationError):
    """Borrow requested for a book that is already checked out."""


class AlreadyReturnedError(ValidationError):
    """Return requested for a book that is not checked out."""


class NotFoundError(LibraryError, LookupError):
    """No record matches the accession number or search term."""


class CatalogError(LibraryError):
    """The catalog file could not be loaded or saved."""


class CatalogIOError(CatalogError, OSError):
    """Opening, reading, writing or closing the catalog file failed."""


class CatalogNotFoundError(CatalogIOError):
    """The catalog file does not exist."""


class CatalogFormatError(CatalogError, ValueError):
    """The catalog file header does not match the expected header."""


class InputEOF(LibraryError, EOFError):
    """End of input was reached while waiting for a prompt answer."""
