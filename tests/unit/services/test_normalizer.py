"""Unit tests for research_finder.services.normalizer."""

import pytest

from research_finder.models.model_crossref import UpstreamRecord
from research_finder.models.research import ResearchItem
from research_finder.services.normalizer import (
    as_text,
    date_year,
    dig,
    first_text,
    normalize,
)


# ---------------------------------------------------------------------------
# normalize
# ---------------------------------------------------------------------------


def test_normalize_full_record(crossref_work):
    item = normalize(crossref_work)

    assert item == ResearchItem(
        title="Foo",
        authors=["A B"],
        journal="J",
        year=2020,
        doi="10.1/x",
        abstract="",
        url="",
    )
    assert item.model_dump() == {
        "title": "Foo",
        "authors": ["A B"],
        "journal": "J",
        "year": 2020,
        "doi": "10.1/x",
        "abstract": "",
        "url": "",
    }


def test_normalize_empty_record_defaults_every_field():
    item = normalize({})

    assert item.title == ""
    assert item.authors == []
    assert item.journal == ""
    assert item.year == ""
    assert item.doi == ""
    assert item.abstract == ""
    assert item.url == ""


def test_normalize_accepts_upstream_record(crossref_work):
    record = UpstreamRecord.from_raw(crossref_work)
    assert normalize(record) == normalize(crossref_work)


def test_scalar_title_and_journal():
    item = normalize({"title": "Plain", "container-title": "Nature"})
    assert item.title == "Plain"
    assert item.journal == "Nature"


def test_empty_title_list_becomes_empty_string():
    assert normalize({"title": []}).title == ""


def test_author_name_parts_default_to_empty():
    item = normalize(
        {
            "author": [
                {"family": "Curie"},
                {"given": "Ada"},
                {"name": "Consortium"},
                {"given": " Ada ", "family": "Lovelace "},
            ]
        }
    )
    assert item.authors == ["Curie", "Ada", "", "Ada  Lovelace"]


def test_malformed_author_entries_are_kept_as_empty_strings():
    item = normalize({"author": [None, 5, {"given": None, "family": None}]})
    assert item.authors == ["", "", ""]


def test_author_not_a_list_gives_no_authors():
    assert normalize({"author": "Someone"}).authors == []


def test_year_falls_back_to_created():
    item = normalize(
        {
            "issued": {"date-parts": [[None]]},
            "created": {"date-parts": [[2018, 5, 1]]},
        }
    )
    assert item.year == 2018


@pytest.mark.parametrize(
    "record",
    [
        {"issued": {}},
        {"issued": {"date-parts": []}},
        {"issued": {"date-parts": [[]]}},
        {"issued": None, "created": {"date-parts": "2020"}},
        {"issued": {"date-parts": [["  "]]}},
    ],
)
def test_year_missing_at_any_level(record):
    assert normalize(record).year == ""


def test_abstract_and_url_pass_through():
    item = normalize({"abstract": "<jats:p>Text</jats:p>", "URL": "https://doi.org/10.1/x"})
    assert item.abstract == "<jats:p>Text</jats:p>"
    assert item.url == "https://doi.org/10.1/x"


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "not a record",
        42,
        [],
        {"title": {"nested": True}},
        {"title": [None]},
        {"DOI": ["10.1/x"]},
        {"container-title": [[]]},
        {"issued": "2020", "created": 7},
    ],
)
def test_normalize_never_raises(raw):
    item = normalize(raw)
    assert isinstance(item, ResearchItem)


def test_doi_url():
    assert normalize({"DOI": "10.1/x"}).doi_url == "https://doi.org/10.1/x"
    assert normalize({}).doi_url == ""


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def test_dig_walks_keys_and_indexes():
    value = {"a": [{"b": "found"}]}
    assert dig(value, "a", 0, "b") == "found"
    assert dig(value, "a", 1, "b", default="x") == "x"
    assert dig(value, "missing", default=[]) == []
    assert dig("scalar", "a") is None


def test_dig_treats_none_as_absent():
    assert dig({"a": None}, "a", default="d") == "d"


def test_as_text():
    assert as_text(None) == ""
    assert as_text(12) == "12"
    assert as_text(["x"]) == ""
    assert as_text("x") == "x"


def test_first_text():
    assert first_text(["first", "second"]) == "first"
    assert first_text("scalar") == "scalar"
    assert first_text(None) == ""


def test_date_year_types():
    assert date_year({"date-parts": [[1999, 1]]}) == 1999
    assert date_year({"date-parts": [[1999.0]]}) == 1999
    assert date_year({"date-parts": [["1999"]]}) == "1999"
    assert date_year({"date-parts": [[True]]}) == ""
