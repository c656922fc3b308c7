"""Create the configured database tables and optionally seed rooms."""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.exc import SQLAlchemyError

from parley.db.session import create_tables, drop_tables, session_scope
from parley.models import Room


def seed_rooms(names: list[str]) -> int:
    """Insert rooms that do not exist yet and return how many were added."""
    added = 0
    with session_scope() as db:
        existing = {name for (name,) in db.query(Room.name).all()}
        for name in names:
            if name not in existing:
                db.add(Room(name=name))
                existing.add(name)
                added += 1
    return added


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Create Parley tables and seed rooms")
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop every table before recreating the schema.",
    )
    parser.add_argument(
        "--room",
        action="append",
        default=[],
        metavar="NAME",
        help="Room to create if missing (repeatable).",
    )
    args = parser.parse_args(argv)

    try:
        if args.drop_tables:
            drop_tables()
            print("[init_db] dropped all tables")
        create_tables()
        added = seed_rooms(args.room)
    except SQLAlchemyError as exc:
        print(f"[init_db] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"[init_db] schema ready, {added} room(s) added")


if __name__ == "__main__":
    main()
