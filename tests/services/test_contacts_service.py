"""Contact list and form operations tests (in-memory SQLite)."""
from __future__ import annotations

import pytest

from addressbook.db.engine import init_engine_once, reset_for_tests
from addressbook.db.models import Person
from addressbook.db.repositories import cities_repo
from addressbook.services import contacts_service


@pytest.fixture(autouse=True)
def in_memory_db(monkeypatch):
    reset_for_tests(drop=True)
    monkeypatch.setenv("ADDRESSBOOK_DB_PATH", ":memory:")
    init_engine_once()
    yield
    reset_for_tests(drop=True)


@pytest.fixture
def city_id() -> int:
    return int(cities_repo.get_or_create_city("Turku").id)


def _form(city, **overrides):
    form = {
        "first_name": "Sanna",
        "last_name": "Korhonen",
        "email": "sanna.korhonen@example.com",
        "phone_number": "+358 40 123",
        "street_address": "Aurakatu 1",
        "postal_code": "20100",
        "city_id": str(city),
    }
    form.update(overrides)
    return form


def test_property_types_and_headers():
    assert contacts_service.property_type("POSTALCODE") is int
    assert contacts_service.property_type("CITYID") is int
    assert contacts_service.property_type("LASTNAME") is str
    assert contacts_service.get_property("EMAIL").header_code == "list.column.EMAIL"
    with pytest.raises(contacts_service.UnknownPropertyError):
        contacts_service.property_type("SALARY")


def test_create_contact_returns_new_id(city_id):
    contact_id = contacts_service.create_contact(_form(city_id))

    stored = contacts_service.get_contact(contact_id)
    assert stored["last_name"] == "Korhonen"
    assert stored["postal_code"] == 20100
    assert stored["city_name"] == "Turku"


def test_validation_reports_every_invalid_field(city_id):
    with pytest.raises(contacts_service.ContactValidationError) as excinfo:
        contacts_service.validate_contact(
            _form(city_id, first_name=" ", last_name="", email="no-at-sign", postal_code="01234", city_id="")
        )

    assert excinfo.value.errors == {
        "first_name": "form.error.required",
        "last_name": "form.error.required",
        "email": "form.error.email",
        "postal_code": "form.error.postalCode",
        "city_id": "form.error.city",
    }


def test_empty_optional_fields_are_stored_as_null(city_id):
    values = contacts_service.validate_contact(_form(city_id, email="", postal_code="", phone_number=" "))

    assert values["email"] is None
    assert values["postal_code"] is None
    assert values["phone_number"] is None


def test_new_city_is_created_only_for_valid_input(city_id):
    with pytest.raises(contacts_service.ContactValidationError):
        contacts_service.validate_contact(_form(city_id, last_name="", new_city="Vaasa"))
    assert cities_repo.find_city_ids_by_name("Vaasa") == []

    values = contacts_service.validate_contact(_form(city_id, new_city="Vaasa"))
    assert values["city_id"] == cities_repo.find_city_ids_by_name("Vaasa")[0]


def test_required_field_header_maps_to_column_header():
    assert contacts_service.required_field_header("first_name") == "list.column.FIRSTNAME"


def test_update_with_stale_version_raises(city_id):
    contact_id = contacts_service.create_contact(_form(city_id))
    contacts_service.update_contact(contact_id, _form(city_id, last_name="Nieminen"), version=1)

    with pytest.raises(contacts_service.ConcurrentModificationError):
        contacts_service.update_contact(contact_id, _form(city_id, last_name="Lost"), version=1)
    assert contacts_service.get_contact(contact_id)["last_name"] == "Nieminen"


def test_update_and_delete_unknown_contact(city_id):
    with pytest.raises(contacts_service.ContactNotFoundError):
        contacts_service.update_contact(404, _form(city_id))
    with pytest.raises(contacts_service.ContactNotFoundError):
        contacts_service.delete_contact(404)
    with pytest.raises(contacts_service.ContactNotFoundError):
        contacts_service.get_contact(404)


def test_fix_visible_and_selected_item(monkeypatch, city_id):
    monkeypatch.setenv("ADDRESSBOOK_PAGE_SIZE", "2")
    ids = [contacts_service.create_contact(_form(city_id, last_name=name)) for name in ("A", "B", "C", "B")]
    only_b = Person.last_name == "B"

    assert contacts_service.fix_visible_and_selected_item(None) == (ids[0], 0)
    assert contacts_service.fix_visible_and_selected_item(ids[2]) == (ids[2], 1)
    # filtered-out selection moves to the first visible row
    assert contacts_service.fix_visible_and_selected_item(ids[0], only_b) == (ids[1], 0)
    assert contacts_service.fix_visible_and_selected_item(ids[3], only_b) == (ids[3], 0)
    assert contacts_service.fix_visible_and_selected_item(ids[0], Person.last_name == "Z") == (None, 0)


def test_list_page_clamps_page_and_includes_city_names(monkeypatch, city_id):
    monkeypatch.setenv("ADDRESSBOOK_PAGE_SIZE", "2")
    for name in ("A", "B", "C"):
        contacts_service.create_contact(_form(city_id, last_name=name))

    listing = contacts_service.list_page(page=7)

    assert listing.page == 1
    assert listing.page_count == 2
    assert listing.total == 3
    assert [row["last_name"] for row in listing.rows] == ["C"]
    assert listing.rows[0]["city_name"] == "Turku"
