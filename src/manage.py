"""Storeroom database management CLI.

Creates and drops the Requisitions database schema using the
setup_db/drop_db utilities of the domain.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the database schema for the Requisitions domain."""
    from requisitions.domain import requisitions
    from requisitions.utils.db import setup_db

    print("Initializing requisitions domain...")
    requisitions.init()
    print("Creating requisitions database schema...")
    setup_db(requisitions)
    print("Done.")


def drop_database():
    """Drop the database schema of the Requisitions domain."""
    from requisitions.domain import requisitions
    from requisitions.utils.db import drop_db

    print("Initializing requisitions domain...")
    requisitions.init()
    print("Dropping requisitions database schema...")
    drop_db(requisitions)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Storeroom database management")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("setup-db", help="Create database tables")
    subparsers.add_parser("drop-db", help="Drop database tables")

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
