"""
Reset the learning database (SRS).

DANGEROUS: drops and recreates every SRS table. All card progress, daily
counters, review history and flags are lost. Meant for test databases.

Usage:
    python -m scripts.maintenance.reset_learning_db [--yes]
"""

import argparse

from sqlalchemy.engine import make_url

from core import srs
from core.config import get_database_url
from core.srs.models import Base


def main():
    parser = argparse.ArgumentParser(description="Drop and recreate the SRS tables")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args()

    print("=" * 60)
    print("WARNING: Reset Learning Database")
    print("=" * 60)
    print(f"Database: {make_url(get_database_url()).render_as_string(hide_password=True)}")
    print("Tables to be emptied:")
    for table_name in sorted(Base.metadata.tables):
        print(f"  - {table_name}")
    print()

    if not args.yes:
        answer = input("Type 'yes' to reset: ")
        if answer.strip().lower() != "yes":
            print("Cancelled. Nothing was changed.")
            return

    srs.reset_db()
    print("✓ Reset complete. Empty SRS tables are ready.")


if __name__ == "__main__":
    main()
