"""JSON file storage for the reading list."""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import List, Union

from readinglist.models import Book
from readinglist.parse import BookDecodeError, parse_books, serialize_books

logger = logging.getLogger(__name__)


class LibraryUnreadableError(Exception):
    """Raised when the library document exists but cannot be read or decoded."""


class JsonBookStorage:
    """Whole-document JSON storage: every load reads the file, every save rewrites it."""

    def __init__(
        self,
        path: Union[str, Path],
        indent: int = 4,
        strict: bool = False,
        atomic: bool = True
    ):
        """
        Initialize storage.

        Args:
            path: Location of the library document
            indent: Spaces used when pretty-printing the document
            strict: Reject records without a section on load
            atomic: Write through a temp file and rename it into place
        """
        self.path = Path(path)
        self.indent = indent
        self.strict = strict
        self.atomic = atomic

    def exists(self) -> bool:
        """Check whether the library document is present."""
        return self.path.is_file()

    def read(self) -> List[Book]:
        """
        Read every record from the library document.

        A missing document is an empty library.

        Returns:
            List of Book objects in document order

        Raises:
            LibraryUnreadableError: If the document exists but cannot be
                read, is not UTF-8 JSON, or holds a malformed record
        """
        if not self.exists():
            logger.warning(f"Library file not found: {self.path}")
            return []

        try:
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except OSError as e:
            raise LibraryUnreadableError(f"Could not read library file {self.path}: {e}") from e
        except UnicodeDecodeError as e:
            raise LibraryUnreadableError(f"Library file {self.path} is not UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise LibraryUnreadableError(f"Library file {self.path} is not valid JSON: {e}") from e

        try:
            books = parse_books(document, strict=self.strict)
        except BookDecodeError as e:
            raise LibraryUnreadableError(
                f"Library file {self.path} has a malformed record: {e}"
            ) from e

        logger.info(f"Loaded {len(books)} books from {self.path}")
        return books

    def load(self) -> List[Book]:
        """
        Read every record, treating an unreadable document as empty.

        Callers cannot tell an unreadable document apart from an empty
        library; use ``read`` before writing anything back.
        """
        try:
            return self.read()
        except LibraryUnreadableError as e:
            logger.error(str(e))
            return []

    def save(self, books: List[Book]) -> bool:
        """
        Overwrite the library document with ``books``.

        Args:
            books: Full catalog, in the order it should be written

        Returns:
            True if successful, False otherwise
        """
        data = self._encode(books)

        try:
            if self.atomic:
                self._replace(data)
            else:
                with self.path.open("wb") as f:
                    f.write(data)
        except OSError as e:
            logger.error(f"Failed to save library to {self.path}: {e}")
            return False

        logger.info(f"Saved {len(books)} books to {self.path}")
        return True

    def _encode(self, books: List[Book]) -> bytes:
        """Pretty-printed UTF-8 document; text with lone surrogates is escaped instead."""
        records = serialize_books(books)
        text = json.dumps(records, indent=self.indent, ensure_ascii=False)
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning(f"Escaping non-encodable characters in {self.path}")
            return json.dumps(records, indent=self.indent, ensure_ascii=True).encode("utf-8")

    def _replace(self, data: bytes):
        """Write ``data`` to a sibling temp file, then rename it over the document."""
        # Follow a symlinked document so the link itself survives
        target = Path(os.path.realpath(self.path))
        if target.exists():
            mode = stat.S_IMODE(target.stat().st_mode)
        else:
            umask = os.umask(0)
            os.umask(umask)
            mode = 0o666 & ~umask

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
