"""Persistence for members, the transaction log and group settings.

Every write goes through a SQLAlchemy session and commits before
returning. Recording transactions is the only path that changes member
balances, and it appends to the log and updates the member in one
commit.
"""
import logging
import uuid
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from samity.core.config import settings as app_settings
from samity.db.types import to_naive_utc, utcnow
from samity.models.member import Member
from samity.models.system import SamitySettings
from samity.models.transaction import Transaction, TransactionType
from samity.services.ledger import LedgerError, UnknownMemberReference, apply_transaction

logger = logging.getLogger(__name__)


def _next_seq(db: Session, model) -> int:
    current = db.query(func.max(model.seq)).scalar()
    return (current or 0) + 1


def list_members(db: Session) -> List[Member]:
    """All members, active or not, in insertion order."""
    return db.query(Member).order_by(Member.seq).all()


def get_member(db: Session, member_id: UUID) -> Optional[Member]:
    """Get member by ID."""
    return db.query(Member).filter(Member.id == member_id).first()


def upsert_member(db: Session, member) -> Member:
    """Insert a new member or replace name/phone of an existing one.

    Balances are never touched here; a new member starts at zero.
    """
    existing = get_member(db, member.id) if member.id else None

    if existing:
        existing.name = member.name
        existing.phone_number = member.phone_number
        db.commit()
        db.refresh(existing)
        logger.info(f"Updated member {existing.id}")
        return existing

    created = Member(
        id=member.id or uuid.uuid4(),
        seq=_next_seq(db, Member),
        name=member.name,
        phone_number=member.phone_number,
        is_active=True,
        joined_date=utcnow(),
    )
    db.add(created)
    db.commit()
    db.refresh(created)
    logger.info(f"Added member {created.id} ({created.name})")
    return created


def soft_delete_member(db: Session, member_id: UUID) -> None:
    """Mark a member inactive. Unknown ids are ignored."""
    member = get_member(db, member_id)
    if not member:
        logger.debug(f"Soft delete skipped, member {member_id} not found")
        return

    member.is_active = False
    db.commit()
    logger.info(f"Soft-deleted member {member_id}")


def list_transactions(db: Session) -> List[Transaction]:
    """The whole log in recording order (not necessarily date order)."""
    return db.query(Transaction).order_by(Transaction.seq).all()


def record_transactions(db: Session, transactions: Iterable) -> List[Transaction]:
    """Append transactions to the log and apply each to its member.

    The batch is one unit of work: if any entry references an unknown
    member or carries an invalid amount, the session is rolled back and
    nothing is appended.
    """
    recorded = []
    try:
        seq = _next_seq(db, Transaction)
        for data in transactions:
            member = get_member(db, data.member_id)
            if member is None:
                raise UnknownMemberReference(f"Member {data.member_id} not found")

            tx_date = getattr(data, "date", None)
            tx = Transaction(
                id=uuid.uuid4(),
                seq=seq,
                member_id=member.id,
                date=to_naive_utc(tx_date) if tx_date else utcnow(),
                type=TransactionType(data.type),
                amount=data.amount,
                note=data.note,
            )
            updated = apply_transaction(member, tx)
            member.current_loan_principal = updated.current_loan_principal
            member.total_savings = updated.total_savings

            db.add(tx)
            recorded.append(tx)
            seq += 1

        db.commit()
    except LedgerError as e:
        db.rollback()
        logger.warning(f"Rejected transaction batch, nothing recorded: {e}")
        raise
    except Exception:
        db.rollback()
        logger.error("Transaction batch rolled back", exc_info=True)
        raise

    for tx in recorded:
        logger.info(f"Recorded {tx.type.value} of {tx.amount} for member {tx.member_id}")
    return recorded


def record_transaction(db: Session, transaction) -> Transaction:
    """Append one transaction and update its member's balances."""
    return record_transactions(db, [transaction])[0]


def get_settings(db: Session) -> SamitySettings:
    """Get the settings row, creating it with the configured defaults on first use."""
    row = db.query(SamitySettings).first()
    if row:
        return row

    row = SamitySettings(
        id=1,
        interest_rate=app_settings.DEFAULT_INTEREST_RATE,
        monthly_savings_amount=app_settings.DEFAULT_MONTHLY_SAVINGS_AMOUNT,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def save_settings(db: Session, new_settings) -> SamitySettings:
    """Replace the settings."""
    row = get_settings(db)
    row.interest_rate = new_settings.interest_rate
    row.monthly_savings_amount = new_settings.monthly_savings_amount
    db.commit()
    db.refresh(row)
    logger.info(
        f"Settings saved: interest_rate={row.interest_rate}, "
        f"monthly_savings_amount={row.monthly_savings_amount}"
    )
    return row


def reset_all(db: Session) -> None:
    """Delete every transaction, member and the settings row."""
    try:
        deleted_txs = db.query(Transaction).delete()
        deleted_members = db.query(Member).delete()
        db.query(SamitySettings).delete()
        db.commit()
        db.expunge_all()
    except Exception:
        db.rollback()
        logger.error("Reset rolled back", exc_info=True)
        raise
    logger.info(f"Reset: removed {deleted_txs} transactions and {deleted_members} members")
