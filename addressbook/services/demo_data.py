"""Demo content for a fresh database: cities, random persons, two logins.

Each step is idempotent: cities and persons are only generated into empty
tables and accounts are only created when the username is free.
"""
from __future__ import annotations

import random
from typing import Dict, List, Optional

from addressbook import config as app_config
from addressbook.db.repositories import cities_repo, contacts_repo
from addressbook.services import auth_service
from addressbook.utils.logging import get_logger

LOG = get_logger("demo_data")

FIRST_NAMES = (
    "Peter", "Alice", "Joshua", "Mike", "Olivia", "Nina", "Alex", "Rita",
    "Dan", "Umberto", "Henrik", "Rene", "Lisa", "Marge", "Linda", "Timothy",
    "Daniel", "Brian", "Greg", "Scott", "Dennis", "Oscar", "Clara", "Sanna",
)
LAST_NAMES = (
    "Smith", "Gordon", "Simpson", "Brown", "Clavel", "Simons", "Verne", "Scott",
    "Allison", "Gates", "Rowling", "Barks", "Ross", "Schneider", "Tate", "Virtanen",
    "Lindqvist", "Korhonen", "Nieminen", "Holmberg",
)
CITY_NAMES = (
    "Amsterdam", "Berlin", "Helsinki", "Hong Kong", "London", "Luxemburg",
    "New York", "Oslo", "Paris", "Rome", "Stockholm", "Tokyo", "Turku",
)
STREETS = (
    "4215 Blandit Av.", "452-8121 Sem Ave", "279-4475 Tellus Road",
    "4062 Libero. Av.", "7081 Pede. Ave", "6800 Aliquet St.",
    "P.O. Box 298, 9401 Mauris St.", "161-7279 Augue Ave",
    "P.O. Box 496, 1390 Sagittis. Rd.", "448-8295 Mi Avenue",
)


def seed_cities() -> Dict[str, int]:
    """Create the demo cities when the table is empty. Returns name -> id."""
    if cities_repo.count_cities() == 0:
        for name in CITY_NAMES:
            cities_repo.get_or_create_city(name)
        LOG.info("Seeded %s demo cities", len(CITY_NAMES))
    return {city.name: int(city.id) for city in cities_repo.list_cities()}


def _random_person(rng: random.Random, city_ids: List[int]) -> dict:
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return {
        "first_name": first,
        "last_name": last,
        "email": f"{first.lower()}.{last.lower()}@example.com",
        "phone_number": f"+358 {rng.randint(10, 99)} {rng.randint(1000, 9999)} {rng.randint(100, 999)}",
        "street_address": rng.choice(STREETS),
        "postal_code": rng.randint(10000, 99999),
        "city_id": rng.choice(city_ids),
    }


def seed_persons(count: Optional[int] = None, *, seed: Optional[int] = None) -> int:
    """Generate ``count`` random persons into an empty person table."""
    if contacts_repo.count_contacts() > 0:
        LOG.debug("Person table not empty; demo persons skipped")
        return 0
    total = app_config.demo_person_count() if count is None else count
    city_ids = list(seed_cities().values())
    rng = random.Random(seed)
    for _ in range(total):
        contacts_repo.create_contact(_random_person(rng, city_ids))
    LOG.info("Seeded %s demo persons", total)
    return total


def seed_accounts() -> List[str]:
    created: List[str] = []
    accounts = (
        (app_config.admin_username(), app_config.admin_password(), (auth_service.ROLE_USER, auth_service.ROLE_ADMIN)),
        (app_config.user_username(), app_config.user_password(), (auth_service.ROLE_USER,)),
    )
    for username, password, roles in accounts:
        if auth_service.ensure_account(username, password, roles=roles):
            created.append(username)
    return created


def seed_all() -> dict:
    """Run every demo seed step; returns a summary for logging."""
    summary = {
        "cities": len(seed_cities()),
        "persons": seed_persons(),
        "accounts": seed_accounts(),
    }
    LOG.info("Demo data ready cities=%s persons_created=%s accounts_created=%s",
             summary["cities"], summary["persons"], ",".join(summary["accounts"]) or "-")
    return summary


__all__ = [
    "FIRST_NAMES",
    "LAST_NAMES",
    "CITY_NAMES",
    "seed_cities",
    "seed_persons",
    "seed_accounts",
    "seed_all",
]
