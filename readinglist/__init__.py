"""Personal reading-list manager backed by a JSON file."""
from readinglist.models import Book, Section, SortBy
from readinglist.catalog import AddPolicy, Catalog, open_catalog
from readinglist.storage import JsonBookStorage

__all__ = [
    "AddPolicy",
    "Book",
    "Catalog",
    "JsonBookStorage",
    "Section",
    "SortBy",
    "open_catalog",
]
