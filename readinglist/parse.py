"""Decode and encode book records of the JSON library document."""
from typing import Dict, Any, List

from readinglist.models import Book, Section

REQUIRED_FIELDS = ("id", "title", "author", "datePublished", "genre")
TEXT_FIELDS = ("title", "author", "datePublished", "genre")


class BookDecodeError(ValueError):
    """Raised when a library record cannot be turned into a Book."""


def _is_int(value: Any) -> bool:
    # JSON booleans decode to bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def _check_types(item: Dict[str, Any]):
    """Reject records whose field values have the wrong JSON type."""
    record_id = item["id"]
    if not _is_int(record_id):
        raise BookDecodeError(f"Record id must be an integer, got {record_id!r}")

    for field in TEXT_FIELDS:
        if not isinstance(item[field], str):
            raise BookDecodeError(f"Record {record_id} field {field} must be a string")

    if "pageProgress" in item and not _is_int(item["pageProgress"]):
        raise BookDecodeError(f"Record {record_id} field pageProgress must be an integer")
    if "inLibrary" in item and not isinstance(item["inLibrary"], bool):
        raise BookDecodeError(f"Record {record_id} field inLibrary must be a boolean")
    if "section" in item and not _is_int(item["section"]):
        raise BookDecodeError(f"Record {record_id} has unknown section {item['section']!r}")


def parse_book(item: Dict[str, Any], strict: bool = False) -> Book:
    """
    Parse a single book record.

    Args:
        item: One object from the library JSON array
        strict: Reject records without a ``section`` instead of
            defaulting them to Reading

    Returns:
        Book object

    Raises:
        BookDecodeError: If a required field is missing or has the wrong
            type, or the section ordinal is unknown
    """
    if not isinstance(item, dict):
        raise BookDecodeError(f"Expected an object, got {type(item).__name__}")

    missing = [field for field in REQUIRED_FIELDS if field not in item]
    if missing:
        raise BookDecodeError(f"Record {item.get('id')!r} is missing {', '.join(missing)}")

    _check_types(item)

    if "section" in item:
        try:
            section = Section(item["section"])
        except ValueError:
            raise BookDecodeError(
                f"Record {item['id']!r} has unknown section {item['section']!r}"
            ) from None
    elif strict:
        raise BookDecodeError(f"Record {item['id']!r} has no section")
    else:
        section = Section.READING

    return Book(
        id=item["id"],
        title=item["title"],
        author=item["author"],
        date_published=item["datePublished"],
        genre=item["genre"],
        page_progress=item.get("pageProgress", 0),
        in_library=item.get("inLibrary", True),
        section=section
    )


def serialize_book(book: Book) -> Dict[str, Any]:
    """
    Encode a book as a JSON-ready dict.

    Key order is fixed so rewritten documents diff cleanly.
    """
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "datePublished": book.date_published,
        "genre": book.genre,
        "pageProgress": book.page_progress,
        "inLibrary": book.in_library,
        "section": int(book.section)
    }


def parse_books(document: Any, strict: bool = False) -> List[Book]:
    """
    Parse the full library document.

    Args:
        document: Decoded JSON document (expected to be an array)
        strict: Passed through to ``parse_book``

    Returns:
        List of Book objects in document order
    """
    if not isinstance(document, list):
        raise BookDecodeError(f"Library document must be an array, got {type(document).__name__}")

    return [parse_book(item, strict=strict) for item in document]


def serialize_books(books: List[Book]) -> List[Dict[str, Any]]:
    """Encode books in order."""
    return [serialize_book(book) for book in books]
