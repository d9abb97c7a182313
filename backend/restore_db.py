"""Create (or upgrade) the schema and load the seed data.

The schema comes from the Alembic revisions and the rows from
``data_source/seed.json``; both run in one transaction.

Usage:
    python restore_db.py [--reset] [--no-seed] [--check]

``--reset`` downgrades to an empty schema first and deletes every row.
"""
import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import apply_restore_session_settings, engine
from populate_db import load_fixtures, seed_database
from utils.integrity import find_inconsistent_order_totals

ALEMBIC_INI = Path(__file__).parent / "alembic.ini"


def alembic_config(connection: Connection, configure_logger: bool = True) -> Config:
    # env.py picks the connection up instead of opening its own
    cfg = Config(str(ALEMBIC_INI))
    cfg.attributes["connection"] = connection
    cfg.attributes["configure_logger"] = configure_logger
    return cfg


def restore(
    db_engine: Optional[Engine] = None,
    reset: bool = False,
    seed: bool = True,
    check: bool = False,
    seed_file: Optional[str] = None,
    configure_logger: bool = True,
) -> dict:
    """Runs migrations and seeding in a single transaction and returns a summary."""
    summary = {"seeded": None, "inconsistent_orders": None}
    data = load_fixtures(seed_file) if seed else None

    with (db_engine or engine).begin() as connection:
        apply_restore_session_settings(connection)
        cfg = alembic_config(connection, configure_logger=configure_logger)
        if reset:
            command.downgrade(cfg, "base")
        command.upgrade(cfg, "head")

        session = Session(bind=connection)
        try:
            if data is not None:
                summary["seeded"] = seed_database(session, data)
                session.flush()
            if check:
                summary["inconsistent_orders"] = [o.id for o in find_inconsistent_order_totals(session)]
        finally:
            session.close()

    return summary


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the e-commerce schema and load seed data.")
    parser.add_argument("--reset", action="store_true", help="drop every table (downgrade to base) before migrating")
    parser.add_argument("--no-seed", dest="seed", action="store_false", help="only run migrations")
    parser.add_argument("--check", action="store_true", help="report orders whose totals are out of sync")
    parser.add_argument("--seed-file", default=None, help="fixture file (defaults to SEED_FILE)")
    args = parser.parse_args(argv)

    print("🔧 Restoring database...")
    try:
        summary = restore(reset=args.reset, seed=args.seed, check=args.check, seed_file=args.seed_file)
    except FileNotFoundError as e:
        print(f"Seed file not found: {e.filename}")
        sys.exit(1)
    except (LookupError, ValueError, SQLAlchemyError) as e:
        print(f"❌ Restore failed: {e}")
        sys.exit(1)

    print("✅ Schema is at head.")
    if summary["seeded"] is not None:
        print(f"✅ Seeded: {summary['seeded']}")
    if summary["inconsistent_orders"] is not None:
        if summary["inconsistent_orders"]:
            print(f"⚠️ Orders with inconsistent totals: {summary['inconsistent_orders']}")
            sys.exit(1)
        print("✅ All order totals are consistent.")


if __name__ == "__main__":
    main()
