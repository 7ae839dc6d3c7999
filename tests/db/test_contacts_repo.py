"""Tests for contacts_repo and cities_repo helpers using in-memory SQLite."""
from __future__ import annotations

import pytest

from addressbook.db.engine import init_engine_once, reset_for_tests
from addressbook.db.models import Person
from addressbook.db.repositories import cities_repo, contacts_repo


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("ADDRESSBOOK_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


def _person(last_name: str, city_id: int, postal_code: int = 10000) -> int:
    person = contacts_repo.create_contact(
        {
            "first_name": "Test",
            "last_name": last_name,
            "postal_code": postal_code,
            "city_id": city_id,
        }
    )
    return int(person.id)


def test_create_contact_assigns_id_and_initial_version():
    city = cities_repo.get_or_create_city("Turku")
    contact_id = _person("Virtanen", city.id)

    stored = contacts_repo.get_contact(contact_id)
    assert stored is not None
    assert stored.last_name == "Virtanen"
    assert stored.version == 1


def test_position_and_first_id_respect_predicate():
    city = cities_repo.get_or_create_city("Oslo")
    first = _person("Alpha", city.id)
    second = _person("Beta", city.id)
    third = _person("Alpha", city.id)
    only_alpha = Person.last_name == "Alpha"

    assert contacts_repo.count_contacts() == 3
    assert contacts_repo.count_contacts(only_alpha) == 2
    assert contacts_repo.list_contact_ids(only_alpha) == [first, third]
    assert contacts_repo.position_of(third, only_alpha) == 1
    assert contacts_repo.position_of(second, only_alpha) is None
    assert contacts_repo.first_contact_id(Person.last_name == "Beta") == second
    assert contacts_repo.first_contact_id(Person.last_name == "Nobody") is None


def test_list_contacts_pages_in_id_order():
    city = cities_repo.get_or_create_city("Rome")
    ids = [_person(f"Name{i}", city.id) for i in range(5)]

    page = contacts_repo.list_contacts(None, offset=2, limit=2)

    assert [person.id for person in page] == ids[2:4]


def test_update_contact_with_stale_version_is_rejected():
    city = cities_repo.get_or_create_city("Paris")
    contact_id = _person("Original", city.id)

    updated = contacts_repo.update_contact(contact_id, {"last_name": "Changed"}, expected_version=1)
    assert updated is not None
    assert updated.version == 2

    with pytest.raises(contacts_repo.StaleContactError):
        contacts_repo.update_contact(contact_id, {"last_name": "Again"}, expected_version=1)
    assert contacts_repo.get_contact(contact_id).last_name == "Changed"


def test_update_and_delete_missing_contact():
    assert contacts_repo.update_contact(999, {"last_name": "X"}) is None
    assert contacts_repo.delete_contact(999) is False


def test_delete_contact_removes_row():
    city = cities_repo.get_or_create_city("Tokyo")
    contact_id = _person("Gone", city.id)

    assert contacts_repo.delete_contact(contact_id) is True
    assert contacts_repo.get_contact(contact_id) is None


def test_get_or_create_city_is_case_insensitive():
    first = cities_repo.get_or_create_city("Helsinki")
    again = cities_repo.get_or_create_city("  helsinki ")

    assert again.id == first.id
    assert cities_repo.count_cities() == 1
    with pytest.raises(ValueError):
        cities_repo.get_or_create_city("   ")


def test_find_city_ids_by_name_matches_substring():
    helsinki = cities_repo.get_or_create_city("Helsinki")
    oslo = cities_repo.get_or_create_city("Oslo")
    stockholm = cities_repo.get_or_create_city("Stockholm")

    assert cities_repo.find_city_ids_by_name("ls") == [helsinki.id]
    assert cities_repo.find_city_ids_by_name("o") == [oslo.id, stockholm.id]
    assert stockholm.id in cities_repo.find_city_ids_by_name("holm")
    assert cities_repo.find_city_ids_by_name("zzz") == []
    assert cities_repo.city_names()[helsinki.id] == "Helsinki"
