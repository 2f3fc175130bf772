"""Unit tests for research_finder.client.table_state."""

import pytest

from research_finder.client.table_state import SortDirection, TableState
from research_finder.models.research import ResearchItem


def _titles(rows: list[ResearchItem]) -> list[str]:
    return [r.title for r in rows]


class TestSorting:
    """Column sorting."""

    def test_no_sort_until_column_selected(self):
        items = [ResearchItem(title=t) for t in ["b", "c", "a"]]
        assert _titles(TableState().visible_rows(items)) == ["b", "c", "a"]

    def test_sort_by_year_is_stable(self):
        items = [
            ResearchItem(title="first-2020", year=2020),
            ResearchItem(title="only-2019", year=2019),
            ResearchItem(title="second-2020", year=2020),
            ResearchItem(title="third-2020", year="2020"),
        ]
        state = TableState()
        state.sort_by("year")

        assert _titles(state.visible_rows(items)) == [
            "only-2019",
            "first-2020",
            "second-2020",
            "third-2020",
        ]

    def test_descending_sort_is_stable(self):
        items = [
            ResearchItem(title="a", year=2020),
            ResearchItem(title="b", year=2021),
            ResearchItem(title="c", year=2020),
        ]
        state = TableState()
        state.sort_by("year", SortDirection.DESC)

        assert _titles(state.visible_rows(items)) == ["b", "a", "c"]

    def test_year_numeric_then_lexical_fallback(self):
        items = [
            ResearchItem(title="blank", year=""),
            ResearchItem(title="y10", year=10),
            ResearchItem(title="nd", year="n.d."),
            ResearchItem(title="y9", year="9"),
        ]
        state = TableState()
        state.sort_by("year")

        assert _titles(state.visible_rows(items)) == ["y9", "y10", "blank", "nd"]

    def test_non_finite_year_strings_sort_lexically(self):
        items = [
            ResearchItem(title="a", year=2020),
            ResearchItem(title="b", year="NaN"),
            ResearchItem(title="c", year=2010),
            ResearchItem(title="d", year=2015),
            ResearchItem(title="e", year="Infinity"),
        ]
        state = TableState()
        state.sort_by("year")

        assert _titles(state.visible_rows(items)) == ["c", "d", "a", "e", "b"]

    def test_title_sort_is_case_insensitive(self):
        items = [ResearchItem(title=t) for t in ["beta", "Alpha", "gamma"]]
        state = TableState()
        state.sort_by("title")
        assert _titles(state.visible_rows(items)) == ["Alpha", "beta", "gamma"]

    @pytest.mark.parametrize("column", ["journal", "doi", "authors"])
    def test_lexical_columns(self, column):
        items = [
            ResearchItem(title="2", journal="B", doi="10.2", authors=["B"]),
            ResearchItem(title="1", journal="A", doi="10.1", authors=["A"]),
        ]
        state = TableState()
        state.sort_by(column)
        assert _titles(state.visible_rows(items)) == ["1", "2"]

    def test_unknown_column_rejected(self):
        with pytest.raises(ValueError, match="Unknown sort column"):
            TableState().sort_by("abstract")

    def test_toggle_cycle(self):
        state = TableState()

        state.toggle_sort("title")
        assert (state.sort_key, state.sort_direction) == ("title", SortDirection.ASC)
        state.toggle_sort("title")
        assert (state.sort_key, state.sort_direction) == ("title", SortDirection.DESC)
        state.toggle_sort("title")
        assert state.sort_key is None
        state.toggle_sort("year")
        state.toggle_sort("doi")
        assert (state.sort_key, state.sort_direction) == ("doi", SortDirection.ASC)

    def test_sorting_does_not_mutate_results(self, make_items):
        items = make_items(3)[::-1]
        state = TableState()
        state.sort_by("title")
        state.visible_rows(items)
        assert _titles(items) == ["Paper 02", "Paper 01", "Paper 00"]


class TestPagination:
    """Page slicing."""

    def test_page_slice(self, make_items):
        state = TableState(page_size=10, page_index=1)
        assert _titles(state.visible_rows(make_items(30))) == [f"Paper {i:02d}" for i in range(10, 20)]

    def test_last_partial_page(self, make_items):
        state = TableState(page_size=10, page_index=2)
        assert len(state.visible_rows(make_items(25))) == 5

    def test_page_index_clamped_to_last_page(self, make_items):
        state = TableState(page_size=10, page_index=7)
        assert _titles(state.visible_rows(make_items(12))) == ["Paper 10", "Paper 11"]

    def test_empty_results(self):
        state = TableState(page_index=3)
        assert state.visible_rows([]) == []
        assert state.page_count(0) == 0

    def test_sort_applies_before_pagination(self, make_items):
        state = TableState(page_size=2)
        state.sort_by("year", SortDirection.DESC)
        assert _titles(state.visible_rows(make_items(5))) == ["Paper 04", "Paper 03"]

    def test_page_count(self):
        state = TableState(page_size=10)
        assert state.page_count(30) == 3
        assert state.page_count(31) == 4

    def test_set_page_size_keeps_first_row_visible(self):
        state = TableState(page_size=10, page_index=2)  # first row 20
        state.set_page_size(25)
        assert state.page_index == 0
        state.go_to_page(1)  # first row 25
        state.set_page_size(5)
        assert state.page_index == 5

    def test_invalid_page_arguments(self):
        state = TableState()
        with pytest.raises(ValueError):
            state.go_to_page(-1)
        with pytest.raises(ValueError):
            state.set_page_size(0)
