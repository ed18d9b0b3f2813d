"""
Tests for PaginatedResultSet: clamped navigation over an ordered collection.
"""
import pytest

from filesweep.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResultSet, total_pages


class TestTotalPages:
    @pytest.mark.parametrize("n, page_size, expected", [
        (0, 20, 1),
        (1, 20, 1),
        (20, 20, 1),
        (21, 20, 2),
        (45, 20, 3),
        (7, 1, 7),
    ])
    def test_ceiling_with_minimum_one(self, n, page_size, expected):
        assert total_pages(n, page_size) == expected

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            total_pages(10, 0)


class TestPaginatedResultSet:
    def test_default_page_size(self):
        assert PaginatedResultSet().page_size == DEFAULT_PAGE_SIZE == 20

    def test_forty_five_items_three_pages(self):
        pages = PaginatedResultSet(range(45), page_size=20)
        assert pages.total_pages == 3

        pages.last()
        assert pages.page_items() == list(range(40, 45))
        assert pages.page_label() == "Page 3 of 3"

    def test_next_at_last_page_is_noop(self):
        pages = PaginatedResultSet(range(45), page_size=20)
        pages.last()
        assert pages.next() == 2
        assert pages.current_page == 2

    def test_prev_at_first_page_is_noop(self):
        pages = PaginatedResultSet(range(5), page_size=2)
        assert pages.prev() == 0
        assert not pages.has_prev

    def test_go_to_clamps(self):
        pages = PaginatedResultSet(range(10), page_size=3)
        assert pages.go_to(99) == 3
        assert pages.go_to(-5) == 0

    def test_initial_page_clamped(self):
        pages = PaginatedResultSet(range(10), page_size=5, page=7)
        assert pages.current_page == 1

    def test_empty_collection_has_one_empty_page(self):
        pages = PaginatedResultSet([], page_size=20)
        assert pages.total_pages == 1
        assert pages.current_page == 0
        assert pages.page_items() == []
        assert pages.is_empty
        assert not pages.has_next

    def test_has_next_and_offset(self):
        pages = PaginatedResultSet(range(25), page_size=10)
        assert pages.has_next
        pages.next()
        assert pages.offset == 10
        assert pages.page_items() == list(range(10, 20))

    def test_page_items_is_fresh_slice(self):
        pages = PaginatedResultSet([1, 2, 3], page_size=2)
        items = pages.page_items()
        items.append(99)
        assert pages.page_items() == [1, 2]

    def test_source_is_copied(self):
        source = [1, 2, 3]
        pages = PaginatedResultSet(source, page_size=2)
        source.clear()
        assert len(pages) == 3

    def test_remove_where_reclamps(self):
        """Removing the whole last page moves the view back to the new last page."""
        pages = PaginatedResultSet(range(45), page_size=20)
        pages.last()
        removed = pages.remove_where(lambda x: x >= 40)
        assert removed == 5
        assert pages.total_pages == 2
        assert pages.current_page == 1

    def test_replace_reclamps(self):
        pages = PaginatedResultSet(range(45), page_size=20)
        pages.last()
        pages.replace([1, 2])
        assert pages.current_page == 0
        assert pages.page_items() == [1, 2]

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            PaginatedResultSet([1], page_size=0)
