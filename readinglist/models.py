"""Data models for the reading list."""
from dataclasses import dataclass
from enum import Enum, IntEnum


class Section(IntEnum):
    """Shelf a book sits on. The integer value is the on-disk encoding."""
    READING = 0
    READ = 1
    WISH = 2


class SortBy(Enum):
    """Sort keys, each naming the Book attribute it compares."""
    TITLE = "title"
    AUTHOR = "author"
    DATE = "date_published"
    GENRE = "genre"


@dataclass
class Book:
    """One reading-list entry."""
    id: int
    title: str
    author: str
    date_published: str
    genre: str
    page_progress: int = 0
    in_library: bool = True
    section: Section = Section.READING

    @property
    def is_reading(self) -> bool:
        """True while the book is on the Reading shelf."""
        return self.section == Section.READING
