from datetime import date

import pytest

from librlog.book import BookRecord
from librlog.library import Library

FIXED_TODAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # set_output_mode() writes to os.environ; keep every test on plain output
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")


@pytest.fixture
def catalog_file(tmp_path):
    return tmp_path / "data" / "library_catalog.csv"


@pytest.fixture
def lib(catalog_file):
    # A separate catalog file and a fixed "today" for each test
    return Library(data_file=str(catalog_file), today=lambda: FIXED_TODAY)


@pytest.fixture
def make_book():
    def _make(**overrides) -> BookRecord:
        data = {
            "title": "Dune",
            "author": "Frank Herbert",
            "publisher": "Chilton",
            "publication_year": "1965",
            "isbn": "9780441013593",
            "accession_number": "",
            "genre": "Sci-Fi",
        }
        data.update(overrides)
        return BookRecord.from_dict(data)
    return _make
