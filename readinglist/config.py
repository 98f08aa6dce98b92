"""Configuration management."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    """Read a true/false style environment variable."""
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration."""

    # Storage
    LIBRARY_FILE = os.getenv("READINGLIST_FILE", "books.json")
    JSON_INDENT = int(os.getenv("READINGLIST_INDENT", "4"))
    ATOMIC_WRITES = _env_flag("READINGLIST_ATOMIC_WRITES", "true")
    STRICT_SECTION = _env_flag("READINGLIST_STRICT_SECTION", "false")

    # Catalog behaviour: "reactivate" or "insert"
    ADD_POLICY = os.getenv("READINGLIST_ADD_POLICY", "reactivate").strip().lower()

    @property
    def LIBRARY_PATH(self) -> Path:
        """Path of the library document."""
        return Path(self.LIBRARY_FILE)
