#!/usr/bin/env python3
"""Seeding orchestrator.

Creates the schema and runs the demo seed steps (cities, persons, accounts)
in an idempotent order with one concise log line per step.

Exit Codes:
  0 = all ok / or already present
  3 = one or more seed steps failed
"""
from __future__ import annotations

import os
import sys

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from addressbook.db import init_engine_once  # noqa: E402
from addressbook.services import demo_data  # noqa: E402


def main() -> int:  # pragma: no cover (thin wrapper)
    try:
        init_engine_once()
        cities = demo_data.seed_cities()
        print(f"[SEED] cities ok count={len(cities)}")
        persons = demo_data.seed_persons()
        print(f"[SEED] persons ok created={persons}")
        accounts = demo_data.seed_accounts()
        print(f"[SEED] accounts ok created={','.join(accounts) or '-'}")
    except SQLAlchemyError as exc:
        print(f"[SEED] ERROR {exc}", file=sys.stderr)
        return 3
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
