"""FoodDash database management CLI.

Creates and drops the relational schema behind the domain's repositories and
read models. With the default in-memory configuration there is nothing to do;
run with ``PROTEAN_ENV=production`` to target PostgreSQL.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create tables for every relational provider the domain is configured with."""
    from fooddash.domain import fooddash
    from fooddash.utils.db import setup_db

    print("Initializing fooddash domain...")
    fooddash.init()
    print("Creating fooddash database schema...")
    touched = setup_db(fooddash)
    if touched:
        print(f"  schema ready on: {', '.join(touched)}")
    else:
        print("  no relational providers configured; nothing to create.")

    print("Done.")


def drop_database():
    """Drop tables for every relational provider the domain is configured with."""
    from fooddash.domain import fooddash
    from fooddash.utils.db import drop_db

    print("Initializing fooddash domain...")
    fooddash.init()
    print("Dropping fooddash database schema...")
    touched = drop_db(fooddash)
    if touched:
        print(f"  schema dropped on: {', '.join(touched)}")
    else:
        print("  no relational providers configured; nothing to drop.")

    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="FoodDash database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
