"""Search filter construction and predicate tests (in-memory SQLite)."""
from __future__ import annotations

import pytest

from addressbook.db.engine import init_engine_once, reset_for_tests
from addressbook.db.repositories import cities_repo, contacts_repo
from addressbook.services import contacts_service, search_service
from addressbook.services.search_filter import SearchFilter, dump_filters, load_filters


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("ADDRESSBOOK_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def people():
    helsinki = cities_repo.get_or_create_city("Helsinki")
    stockholm = cities_repo.get_or_create_city("Stockholm")
    oslo = cities_repo.get_or_create_city("Oslo")
    rows = [
        ("Alice", "Smith", 10100, helsinki.id),
        ("Bob", "Smithers", 20200, stockholm.id),
        ("Carol", "Jones", 10100, oslo.id),
        ("Dan", "Brown", 30300, helsinki.id),
    ]
    for first, last, postal, city_id in rows:
        contacts_repo.create_contact(
            {"first_name": first, "last_name": last, "postal_code": postal, "city_id": city_id}
        )
    return {"helsinki": helsinki.id, "stockholm": stockholm.id, "oslo": oslo.id}


def test_text_field_builds_single_like_filter(people):
    filters = search_service.build_search_filters(
        "LASTNAME", " Smith ", search_name="smiths", property_display_name="Last name"
    )

    assert filters == [SearchFilter("LASTNAME", "Smith", "smiths", "Last name", "Smith")]
    predicate = search_service.build_predicate(filters)
    assert contacts_service.size(predicate) == 2


@pytest.mark.parametrize("property_id, term", [("LASTNAME", ""), ("LASTNAME", "   "), ("", "x"), (None, "x"), ("NOPE", "x")])
def test_empty_or_unknown_input_is_rejected(property_id, term):
    with pytest.raises(search_service.SearchError) as excinfo:
        search_service.build_search_filters(property_id, term)
    assert excinfo.value.code == "search.error.empty"


def test_integer_column_uses_equality(people):
    filters = search_service.build_search_filters("POSTALCODE", "10100")

    assert contacts_service.size(search_service.build_predicate(filters)) == 2
    signed = search_service.build_search_filters("POSTALCODE", "+30300")
    assert contacts_service.size(search_service.build_predicate(signed)) == 1


@pytest.mark.parametrize("term", ["12a", "1.5", "abc", "1 2", "99999999999999999999", "-2147483649"])
def test_malformed_integer_term_raises_before_query(people, term):
    filters = [SearchFilter("POSTALCODE", term)]

    with pytest.raises(search_service.InvalidSearchTermError) as excinfo:
        search_service.build_predicate(filters)
    assert excinfo.value.code == "search.error.invalidTerm"


@pytest.mark.parametrize("term", ["2147483647", "-2147483648"])
def test_integer_term_at_32_bit_bounds_is_accepted(people, term):
    assert search_service.build_predicate([SearchFilter("POSTALCODE", term)]) is not None


def test_city_search_expands_to_one_filter_per_matching_city(people):
    filters = search_service.build_search_filters(
        "CITYID", "o", search_name="o-cities", property_display_name="City"
    )

    assert [f.term for f in filters] == [str(people["stockholm"]), str(people["oslo"])]
    assert all(f.property_id == "CITYID" for f in filters)
    assert all(f.term_display_name == "o" for f in filters)
    assert contacts_service.size(search_service.build_predicate(filters)) == 2


def test_city_search_without_match_yields_no_filters(people):
    assert search_service.build_search_filters("CITYID", "Atlantis") == []


def test_filters_combine_with_or(people):
    filters = [SearchFilter("FIRSTNAME", "Carol"), SearchFilter("LASTNAME", "Brown")]

    predicate = search_service.build_predicate(filters)

    assert contacts_service.size(predicate) == 2
    assert search_service.build_predicate([]) is None


def test_save_requires_a_name():
    with pytest.raises(search_service.SearchError) as excinfo:
        search_service.require_search_name(True, "   ")
    assert excinfo.value.code == "search.error.nameRequired"

    search_service.require_search_name(False, "")
    search_service.require_search_name(True, "mine")


def test_filters_survive_session_serialisation():
    filters = [SearchFilter("CITYID", "3", "cities", "City", "hel")]

    assert load_filters(dump_filters(filters)) == filters
    assert load_filters("garbage") == []
