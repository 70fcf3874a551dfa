"""
Tests for list screen criteria commands
"""

import pytest

from services.collection_view import CollectionView, ListScreen, SortDirection

RECORDS = [{"id": i, "name": f"Bot {i:02d}", "status": "active" if i % 3 else "failed"} for i in range(1, 11)]


class TestListScreen:

    def setup_method(self):
        self.view = CollectionView(RECORDS, search_fields=("name",), page_size=3)
        self.screen = ListScreen(self.view, name="bots")

    def test_search_resets_page(self):
        self.screen.go_to_page(3)
        self.screen.set_search("bot 1")

        assert self.screen.criteria.page == 1
        assert [r["id"] for r in self.screen.result().items] == [10]

    def test_set_and_clear_filter(self):
        self.screen.go_to_page(2)
        self.screen.set_filter("status", "failed")

        assert self.screen.criteria.page == 1
        assert self.screen.result().filtered_count == 3

        self.screen.set_filter("status", "")
        assert "status" not in self.screen.criteria.filters
        assert self.screen.result().filtered_count == 10

    def test_reset_filters(self):
        self.screen.set_search("bot")
        self.screen.set_filter("status", "failed")
        self.screen.go_to_page(2)

        self.screen.reset_filters()

        criteria = self.screen.criteria
        assert (criteria.search, criteria.filters, criteria.page) == ("", {}, 1)

    def test_sort_by_same_field_toggles(self):
        self.screen.sort_by("name")
        assert self.screen.criteria.sort_direction == SortDirection.ASC

        self.screen.sort_by("name")
        assert self.screen.criteria.sort_direction == SortDirection.DESC
        assert self.screen.result().items[0]["id"] == 10

        self.screen.sort_by("name")
        assert self.screen.criteria.sort_direction == SortDirection.ASC

    def test_sort_by_new_field_starts_ascending(self):
        self.screen.sort_by("name")
        self.screen.sort_by("name")
        self.screen.sort_by("status")

        assert self.screen.criteria.sort_field == "status"
        assert self.screen.criteria.sort_direction == SortDirection.ASC

    def test_sort_keeps_page(self):
        self.screen.go_to_page(2)
        self.screen.sort_by("name")

        assert self.screen.criteria.page == 2

    def test_next_and_previous_are_bounded(self):
        assert self.screen.previous_page() is False

        assert self.screen.next_page() is True
        assert self.screen.next_page() is True
        assert self.screen.next_page() is True
        assert self.screen.criteria.page == 4
        assert self.screen.next_page() is False

        assert [r["id"] for r in self.screen.result().items] == [10]
        assert self.screen.previous_page() is True
        assert self.screen.criteria.page == 3

    def test_go_to_page_rejects_zero(self):
        with pytest.raises(ValueError):
            self.screen.go_to_page(0)

    def test_go_to_page_past_end_is_empty(self):
        self.screen.go_to_page(9)

        assert self.screen.result().items == []

    def test_set_source_keeps_criteria(self):
        self.screen.set_filter("status", "failed")
        self.screen.set_source(RECORDS[:5])

        assert self.screen.criteria.filters == {"status": "failed"}
        assert [r["id"] for r in self.screen.result().items] == [3]
