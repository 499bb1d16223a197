#!/usr/bin/env python3
"""
Script to clean the database, removing all members, transactions and settings.

Settings fall back to the configured defaults the next time they are read.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from samity.db.base import SessionLocal
from samity.services import operations, repository


def main():
    db = SessionLocal()
    try:
        members = len(repository.list_members(db))
        transactions = len(repository.list_transactions(db))

        print(f"This will delete {members} members and {transactions} transactions.")
        confirm = input("Type 'yes' to continue: ")
        if confirm.strip().lower() != "yes":
            print("Aborted")
            return

        snapshot = operations.reset_all(db)
        print(f"Database cleaned. Settings restored to interest {snapshot.settings.interest_rate}%, "
              f"monthly savings {snapshot.settings.monthly_savings_amount}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
