"""User-facing operations on the samity ledger.

Each operation validates its input, calls the repository and returns a
fresh snapshot of members, transactions and settings. Nothing is kept
between calls; the database is the only source of truth.
"""
import logging
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from samity.core.config import settings as app_settings
from samity.db.types import utcnow
from samity.models.transaction import TransactionType
from samity.schemas.ledger import BalanceDiscrepancy, DashboardStats, LedgerIntegrityReport
from samity.schemas.member import MemberOverview, MemberResponse, MemberUpsert
from samity.schemas.settings import SettingsResponse, SettingsUpdate
from samity.schemas.snapshot import SamitySnapshot
from samity.schemas.transaction import HistoryFilter, TransactionCreate, TransactionResponse
from samity.services import ledger, repository
from samity.services.ledger import OverRepayment, UnknownMemberReference, ValidationError

logger = logging.getLogger(__name__)


def list_members(db: Session) -> List[MemberResponse]:
    return [MemberResponse.model_validate(m) for m in repository.list_members(db)]


def list_transactions(db: Session) -> List[TransactionResponse]:
    return [TransactionResponse.model_validate(t) for t in repository.list_transactions(db)]


def get_settings(db: Session) -> SettingsResponse:
    return SettingsResponse.model_validate(repository.get_settings(db))


def snapshot(db: Session) -> SamitySnapshot:
    """Current members, transactions and settings."""
    return SamitySnapshot(
        members=list_members(db),
        transactions=list_transactions(db),
        settings=get_settings(db),
    )


def _require_member(db: Session, member_id: UUID):
    member = repository.get_member(db, member_id)
    if member is None:
        raise UnknownMemberReference(f"Member {member_id} not found")
    return member


def _require_members(db: Session, member_ids: Iterable[UUID]) -> List[UUID]:
    """De-duplicate ids (keeping order) and fail if any of them is unknown."""
    ids = list(dict.fromkeys(member_ids))
    missing = [str(i) for i in ids if repository.get_member(db, i) is None]
    if missing:
        raise UnknownMemberReference(f"Members not found: {', '.join(missing)}")
    return ids


def add_or_update_member(db: Session, member: MemberUpsert) -> SamitySnapshot:
    """Add a member, or edit the name and phone number of an existing one."""
    name = (member.name or "").strip()
    phone_number = (member.phone_number or "").strip()
    if not name:
        raise ValidationError("Member name is required")
    if not phone_number:
        raise ValidationError("Member phone number is required")

    repository.upsert_member(db, member.model_copy(update={"name": name, "phone_number": phone_number}))
    return snapshot(db)


def record_transaction(db: Session, transaction: TransactionCreate) -> SamitySnapshot:
    """Validate and record a single transaction.

    Raises:
        InvalidAmount: amount is zero, negative or finer than one paisa.
        UnknownMemberReference: the member does not exist.
        OverRepayment: a repayment exceeds the outstanding principal.
    """
    ledger.validate_amount(transaction.amount)

    member = _require_member(db, transaction.member_id)

    if (
        TransactionType(transaction.type) == TransactionType.LOAN_REPAYMENT
        and transaction.amount > member.current_loan_principal
    ):
        logger.warning(
            f"Rejected repayment of {transaction.amount} for member {member.id}: "
            f"outstanding principal is {member.current_loan_principal}"
        )
        raise OverRepayment(
            f"Repayment of {transaction.amount} exceeds outstanding principal of {member.current_loan_principal}"
        )

    repository.record_transaction(db, transaction)
    return snapshot(db)


def record_bulk_deposits(
    db: Session,
    member_ids: Iterable[UUID],
    amount: Optional[Decimal] = None
) -> SamitySnapshot:
    """Monthly collection: one Deposit per member, same timestamp and note.

    All-or-nothing: every id is checked before anything is recorded. An
    empty selection records nothing.
    """
    if amount is None:
        amount = repository.get_settings(db).monthly_savings_amount
    amount = ledger.validate_amount(amount)

    ids = _require_members(db, member_ids)
    if not ids:
        return snapshot(db)

    collected_at = utcnow()
    deposits = [
        TransactionCreate(
            member_id=member_id,
            type=TransactionType.DEPOSIT,
            amount=amount,
            note=app_settings.MONTHLY_COLLECTION_NOTE,
            date=collected_at,
        )
        for member_id in ids
    ]
    repository.record_transactions(db, deposits)
    logger.info(f"Monthly collection of {amount} recorded for {len(ids)} members")
    return snapshot(db)


def soft_delete_member(db: Session, member_id: UUID) -> SamitySnapshot:
    """Hide a member; their transactions stay in the log."""
    _require_member(db, member_id)
    repository.soft_delete_member(db, member_id)
    return snapshot(db)


def soft_delete_members(db: Session, member_ids: Iterable[UUID]) -> SamitySnapshot:
    """Hide several members. Nothing is deleted if any id is unknown."""
    for member_id in _require_members(db, member_ids):
        repository.soft_delete_member(db, member_id)
    return snapshot(db)


def save_settings(db: Session, new_settings: SettingsUpdate) -> SamitySnapshot:
    ledger.validate_amount(new_settings.monthly_savings_amount)
    repository.save_settings(db, new_settings)
    return snapshot(db)


def reset_all(db: Session) -> SamitySnapshot:
    """Wipe members and transactions and restore default settings."""
    repository.reset_all(db)
    return snapshot(db)


def search_members(db: Session, term: Optional[str] = None) -> List[MemberResponse]:
    return ledger.search_members(list_members(db), term)


def get_member_overview(
    db: Session,
    member_id: UUID,
    history_filter: HistoryFilter = HistoryFilter.ALL
) -> MemberOverview:
    """Member balances, estimated interest, current loan cycle and history."""
    member = MemberResponse.model_validate(_require_member(db, member_id))
    transactions = list_transactions(db)
    group_settings = get_settings(db)

    return MemberOverview(
        member=member,
        estimated_interest_due=ledger.compute_estimated_interest_due(member, group_settings),
        loan_cycle=ledger.compute_loan_cycle_summary(member, transactions),
        history=ledger.filter_member_history(member.id, transactions, history_filter),
    )


def suggest_amount(db: Session, member_id: UUID, transaction_type: TransactionType) -> Optional[Decimal]:
    member = _require_member(db, member_id)
    return ledger.suggest_amount(member, transaction_type, repository.get_settings(db))


def get_dashboard(db: Session) -> DashboardStats:
    return ledger.compute_dashboard_stats(list_members(db), list_transactions(db))


def verify_ledger(db: Session) -> LedgerIntegrityReport:
    """Recompute every member's balances from the log and compare with the stored ones."""
    members = list_members(db)
    transactions = list_transactions(db)

    discrepancies = []
    for member in members:
        derived = ledger.recompute_member_balances(member, transactions)
        if (
            derived.total_savings != member.total_savings
            or derived.current_loan_principal != member.current_loan_principal
        ):
            discrepancies.append(BalanceDiscrepancy(
                member_id=member.id,
                stored_savings=member.total_savings,
                derived_savings=derived.total_savings,
                stored_principal=member.current_loan_principal,
                derived_principal=derived.current_loan_principal,
            ))

    if discrepancies:
        logger.error(f"Ledger integrity check found {len(discrepancies)} members out of balance")

    return LedgerIntegrityReport(
        members_checked=len(members),
        consistent=not discrepancies,
        discrepancies=discrepancies,
    )
