"""
Seed initial data: default settings and, optionally, a few demo members.
"""
import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from samity.db.base import Base, SessionLocal, engine
from samity.models.transaction import TransactionType
from samity.schemas.member import MemberUpsert
from samity.schemas.transaction import TransactionCreate
from samity.services import operations, repository
from decimal import Decimal

DEMO_MEMBERS = [
    {"name": "Rahima Begum", "phone_number": "9876500001"},
    {"name": "Sunil Das", "phone_number": "9876500002"},
    {"name": "Anjali Roy", "phone_number": "9876500003"},
]


def seed_settings(db):
    """Create the settings row with configured defaults."""
    print("Seeding settings...")
    group_settings = repository.get_settings(db)
    print(f"Settings seeded (interest {group_settings.interest_rate}%, "
          f"monthly savings {group_settings.monthly_savings_amount})")


def seed_demo_members(db):
    """Add demo members, one monthly collection and a loan for the first member."""
    print("Seeding demo members...")
    existing = {m.phone_number for m in repository.list_members(db)}

    for member_data in DEMO_MEMBERS:
        if member_data["phone_number"] not in existing:
            operations.add_or_update_member(db, MemberUpsert(**member_data))

    members = repository.list_members(db)
    if not repository.list_transactions(db) and members:
        operations.record_bulk_deposits(db, [m.id for m in members])
        operations.record_transaction(db, TransactionCreate(
            member_id=members[0].id,
            type=TransactionType.LOAN_TAKEN,
            amount=Decimal("5000"),
            note="Demo loan",
        ))

    print(f"Demo members seeded ({len(members)} members)")


def main():
    parser = argparse.ArgumentParser(description="Seed the samity database")
    parser.add_argument("--demo", action="store_true", help="also add demo members and transactions")
    args = parser.parse_args()

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_settings(db)
        if args.demo:
            seed_demo_members(db)
        print("Seeding complete")
    finally:
        db.close()


if __name__ == "__main__":
    main()
