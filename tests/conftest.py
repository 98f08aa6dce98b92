"""Shared fixtures for reading-list tests."""
import json

import pytest

from readinglist.catalog import AddPolicy, Catalog
from readinglist.storage import JsonBookStorage


SAMPLE_RECORDS = [
    {
        "id": 1, "title": "Dune", "author": "Frank Herbert",
        "datePublished": "1965-08-01", "genre": "Science Fiction",
        "pageProgress": 50, "inLibrary": True, "section": 0
    },
    {
        "id": 2, "title": "The Legend of Zelda", "author": "Akira Himekawa",
        "datePublished": "1998-11-21", "genre": "Manga",
        "pageProgress": 0, "inLibrary": True, "section": 2
    },
    {
        "id": 3, "title": "Brave New World", "author": "Aldous Huxley",
        "datePublished": "1932-01-01", "genre": "Dystopian",
        "pageProgress": 0, "inLibrary": True, "section": 1
    },
    {
        "id": 4, "title": "Neuromancer", "author": "William Gibson",
        "datePublished": "1984-07-01", "genre": "Cyberpunk",
        "pageProgress": 12, "inLibrary": False, "section": 0
    },
]


def write_library(path, records):
    """Write raw records as the library document."""
    path.write_text(json.dumps(records, indent=4), encoding="utf-8")


@pytest.fixture
def library_path(tmp_path):
    """Library document pre-filled with the sample records."""
    path = tmp_path / "books.json"
    write_library(path, SAMPLE_RECORDS)
    return path


@pytest.fixture
def storage(library_path):
    return JsonBookStorage(library_path)


@pytest.fixture
def catalog(storage):
    return Catalog(storage)


@pytest.fixture
def inserting_catalog(storage):
    return Catalog(storage, add_policy=AddPolicy.INSERT)
