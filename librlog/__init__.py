"""librlog - Library Catalog Package

This package contains the catalog manager modules:
- Book records (book.py)
- Catalog file codec (catalog.py)
- Record store and circulation logic (library.py)
- Field search (search.py)
- Interactive CLI (main.py)
"""

__version__ = "0.1-a"
