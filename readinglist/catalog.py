"""Reading-list catalog operations on top of the JSON storage."""
import dataclasses
import logging
import string
from enum import Enum
from operator import attrgetter
from typing import Optional, List, Dict

from readinglist.config import Config
from readinglist.models import Book, Section, SortBy
from readinglist.storage import JsonBookStorage, LibraryUnreadableError

logger = logging.getLogger(__name__)

# Only A-Z are folded; other characters compare as-is.
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(text: str) -> str:
    """Lowercase ASCII letters only."""
    return text.translate(_ASCII_LOWER)


def _find(books: List[Book], book_id: int) -> Optional[Book]:
    """First record with ``book_id`` in document order, removed ones included."""
    return next((b for b in books if b.id == book_id), None)


class AddPolicy(Enum):
    """What ``add_book`` does with an id that has no record at all."""
    REACTIVATE = "reactivate"  # fail, only removed records come back
    INSERT = "insert"  # append the supplied book


class Catalog:
    """
    Book catalog backed by a JSON document.

    Nothing is cached between calls: every operation loads the stored
    catalog, and every successful mutation writes the whole catalog back.
    Concurrent writers are not coordinated, so the last save wins.
    """

    def __init__(self, storage: JsonBookStorage, add_policy: AddPolicy = AddPolicy.REACTIVATE):
        """
        Initialize catalog.

        Args:
            storage: Storage the catalog is read from and written to
            add_policy: Behaviour of ``add_book`` for unknown ids
        """
        self.storage = storage
        self.add_policy = add_policy

    def _load_for_update(self) -> Optional[List[Book]]:
        """Stored catalog, or None when the document is unreadable and must not be overwritten."""
        try:
            return self.storage.read()
        except LibraryUnreadableError as e:
            logger.error(f"Refusing to modify the library: {e}")
            return None

    def add_book(self, book: Book, section: Section) -> bool:
        """
        Put a book on the given shelf.

        A removed record with the same id is reactivated; only its
        ``in_library`` flag and section change, the other fields of
        ``book`` are ignored. An unknown id is inserted only under
        ``AddPolicy.INSERT``.

        Args:
            book: Book to add
            section: Shelf to place it on

        Returns:
            True if the catalog changed and was saved
        """
        books = self._load_for_update()
        if books is None:
            return False
        existing = _find(books, book.id)

        if existing is not None:
            if existing.in_library:
                logger.warning(f"Book {book.id} is already in the library")
                return False
            existing.in_library = True
            existing.section = section
            logger.info(f"Reactivated book {book.id} in {section.name}")
            return self.storage.save(books)

        if self.add_policy is not AddPolicy.INSERT:
            logger.warning(f"Book {book.id} not found in storage")
            return False

        books.append(dataclasses.replace(book, in_library=True, section=section))
        logger.info(f"Inserted book {book.id} in {section.name}")
        return self.storage.save(books)

    def remove_book(self, book_id: int) -> bool:
        """Soft-delete a book by clearing its ``in_library`` flag."""
        books = self._load_for_update()
        if books is None:
            return False
        book = _find(books, book_id)
        if book is None or not book.in_library:
            logger.warning(f"Cannot remove book {book_id}: not in library")
            return False

        book.in_library = False
        logger.info(f"Removed book {book_id}")
        return self.storage.save(books)

    def change_section(self, book_id: int, new_section: Section) -> bool:
        """Move a book to another shelf. Reading progress is left untouched."""
        books = self._load_for_update()
        if books is None:
            return False
        book = _find(books, book_id)
        if book is None:
            logger.warning(f"Cannot move book {book_id}: not found")
            return False

        book.section = new_section
        logger.info(f"Moved book {book_id} to {new_section.name}")
        return self.storage.save(books)

    def update_progress(self, book_id: int, page: int) -> bool:
        """
        Record the page reached in a book.

        Args:
            book_id: Book to update
            page: New page number, stored without bounds checks

        Returns:
            True if saved, False if the book is missing or not being read
        """
        books = self._load_for_update()
        if books is None:
            return False
        book = _find(books, book_id)
        if book is None:
            logger.warning(f"Cannot update progress of book {book_id}: not found")
            return False
        if not book.is_reading:
            logger.warning(
                f"Cannot update progress of book {book_id}: section is {book.section.name}"
            )
            return False

        book.page_progress = page
        logger.info(f"Book {book_id} progress set to page {page}")
        return self.storage.save(books)

    def get_books(self, section: Optional[Section] = None) -> List[Book]:
        """
        List books in the library.

        Args:
            section: Only return books on this shelf

        Returns:
            In-library books in stored order
        """
        return [
            b for b in self.storage.load()
            if b.in_library and (section is None or b.section == section)
        ]

    def get_books_sorted(
        self,
        section: Optional[Section] = None,
        sort_by: SortBy = SortBy.TITLE
    ) -> List[Book]:
        """Same as ``get_books``, sorted ascending by ``sort_by``. Ties keep stored order."""
        return sorted(self.get_books(section), key=attrgetter(sort_by.value))

    def search_books(self, term: str, section: Optional[Section] = None) -> List[Book]:
        """
        Find books whose title, author or genre contains ``term``.

        Matching ignores ASCII case. An empty term matches every book.

        Args:
            term: Text to look for
            section: Only search this shelf

        Returns:
            Matching in-library books in stored order
        """
        needle = ascii_lower(term)
        return [
            b for b in self.get_books(section)
            if needle in ascii_lower(b.title)
            or needle in ascii_lower(b.author)
            or needle in ascii_lower(b.genre)
        ]

    def get_book(self, book_id: int) -> Optional[Book]:
        """Look up a record by id, removed books included."""
        return _find(self.storage.load(), book_id)

    def get_stats(self) -> Dict[str, int]:
        """Get catalog statistics."""
        books = self.storage.load()
        active = [b for b in books if b.in_library]

        stats = {
            "total_records": len(books),
            "in_library": len(active),
            "removed": len(books) - len(active),
        }
        for section in Section:
            stats[section.name.lower()] = sum(1 for b in active if b.section == section)
        return stats


def open_catalog(config: Optional[Config] = None) -> Catalog:
    """Build a catalog from configuration."""
    config = config or Config()
    storage = JsonBookStorage(
        config.LIBRARY_PATH,
        indent=config.JSON_INDENT,
        strict=config.STRICT_SECTION,
        atomic=config.ATOMIC_WRITES
    )
    return Catalog(storage, add_policy=AddPolicy(config.ADD_POLICY))
