"""
Property-based tests for catalog sorting, search and storage round trips.
"""
from hypothesis import given, strategies as st, settings, HealthCheck

from readinglist.catalog import Catalog, ascii_lower
from readinglist.models import Book, Section, SortBy
from readinglist.storage import JsonBookStorage

# ============================================================================
# Strategies
# ============================================================================

short_text = st.text(max_size=12)

book_strategy = st.builds(
    Book,
    id=st.integers(min_value=0, max_value=10_000),
    title=short_text,
    author=short_text,
    date_published=short_text,
    genre=short_text,
    page_progress=st.integers(min_value=0, max_value=5_000),
    in_library=st.booleans(),
    section=st.sampled_from(Section),
)

library_strategy = st.lists(book_strategy, max_size=15, unique_by=lambda b: b.id)

fixture_settings = settings(
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture]
)


def make_catalog(tmp_path, books):
    storage = JsonBookStorage(tmp_path / "books.json")
    storage.save(books)
    return Catalog(storage)


class TestCatalogProperties:

    @given(books=library_strategy, sort_by=st.sampled_from(SortBy))
    @fixture_settings
    def test_sorted_is_non_decreasing_and_stable(self, tmp_path, books, sort_by):
        """Keys never decrease, and equal keys keep their stored order."""
        catalog = make_catalog(tmp_path, books)
        stored = catalog.get_books()
        position = {b.id: i for i, b in enumerate(stored)}

        result = catalog.get_books_sorted(None, sort_by)

        assert sorted(b.id for b in result) == sorted(position)
        for a, b in zip(result, result[1:]):
            key_a = getattr(a, sort_by.value)
            key_b = getattr(b, sort_by.value)
            assert key_a <= key_b
            if key_a == key_b:
                assert position[a.id] < position[b.id]

    @given(books=library_strategy, section=st.one_of(st.none(), st.sampled_from(Section)))
    @fixture_settings
    def test_empty_search_matches_every_listed_book(self, tmp_path, books, section):
        catalog = make_catalog(tmp_path, books)

        assert catalog.search_books("", section) == catalog.get_books(section)

    @given(books=library_strategy, index=st.integers(min_value=0), data=st.data())
    @fixture_settings
    def test_search_finds_any_title_fragment_in_any_case(self, tmp_path, books, index, data):
        active = [b for b in books if b.in_library]
        if not active:
            return
        target = active[index % len(active)]
        start = data.draw(st.integers(min_value=0, max_value=len(target.title)))
        end = data.draw(st.integers(min_value=start, max_value=len(target.title)))
        term = target.title[start:end].upper()
        catalog = make_catalog(tmp_path, books)

        found = catalog.search_books(term)

        # str.upper() may change non-ASCII letters; only assert for ASCII terms
        if ascii_lower(term) == ascii_lower(target.title[start:end]):
            assert target.id in [b.id for b in found]

    @given(books=library_strategy)
    @fixture_settings
    def test_save_load_round_trip(self, tmp_path, books):
        storage = JsonBookStorage(tmp_path / "books.json")

        storage.save(books)
        first = storage.load()
        storage.save(first)

        assert storage.load() == first == books

    @given(books=library_strategy, page=st.integers(min_value=0, max_value=5_000))
    @fixture_settings
    def test_update_progress_succeeds_only_while_reading(self, tmp_path, books, page):
        catalog = make_catalog(tmp_path, books)

        for book in books:
            assert catalog.update_progress(book.id, page) == (book.section is Section.READING)
            stored = catalog.get_book(book.id)
            expected = page if book.section is Section.READING else book.page_progress
            assert stored.page_progress == expected
