"""Ledger derivation engine.

Pure functions that turn the append-only transaction log into member
balances, organisation totals and loan-cycle summaries. Nothing in here
touches the database; inputs may be pydantic schemas or ORM rows, and are
never mutated.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional
from uuid import UUID

from samity.models.transaction import TransactionType
from samity.schemas.ledger import DashboardStats, LoanCycleSummary, OrganizationStats
from samity.schemas.member import MemberResponse
from samity.schemas.transaction import HistoryFilter

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")

LOAN_HISTORY_TYPES = (
    TransactionType.LOAN_TAKEN,
    TransactionType.LOAN_REPAYMENT,
    TransactionType.INTEREST_PAID,
)


class LedgerError(ValueError):
    """Base exception for rejected ledger operations."""
    pass


class InvalidAmount(LedgerError):
    """Amount is zero, negative or not a number."""
    pass


class UnknownMemberReference(LedgerError):
    """Transaction or deletion targets a member id that does not exist."""
    pass


class OverRepayment(LedgerError):
    """Repayment is larger than the outstanding principal."""
    pass


class ValidationError(LedgerError):
    """Required member fields are missing."""
    pass


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def validate_amount(amount) -> Decimal:
    """Return the amount as a Decimal, or raise InvalidAmount.

    Amounts must be positive whole paise (at most two decimal places),
    since that is all the ledger columns can hold.
    """
    try:
        amount = _to_decimal(amount)
    except ArithmeticError:
        raise InvalidAmount(f"Amount is not a number: {amount}")
    if not amount.is_finite() or amount <= ZERO:
        raise InvalidAmount(f"Transaction amount must be greater than zero, got {amount}")
    if amount != amount.quantize(CENT):
        raise InvalidAmount(f"Amount {amount} has more than two decimal places")
    return amount


def _as_member(member) -> MemberResponse:
    if isinstance(member, MemberResponse):
        return member
    return MemberResponse.model_validate(member)


def apply_transaction(member, transaction) -> MemberResponse:
    """Return the member's balances after applying one transaction.

    Repayments larger than the principal are clamped at zero; callers are
    expected to reject them with OverRepayment before getting here.
    """
    member = _as_member(member)
    amount = validate_amount(transaction.amount)
    if transaction.member_id != member.id:
        raise UnknownMemberReference(
            f"Transaction references member {transaction.member_id}, not {member.id}"
        )

    tx_type = TransactionType(transaction.type)
    if tx_type == TransactionType.DEPOSIT:
        return member.model_copy(update={"total_savings": member.total_savings + amount})
    if tx_type == TransactionType.LOAN_TAKEN:
        return member.model_copy(update={"current_loan_principal": member.current_loan_principal + amount})
    if tx_type == TransactionType.LOAN_REPAYMENT:
        remaining = member.current_loan_principal - amount
        if remaining < ZERO:
            logger.warning(
                f"Repayment of {amount} exceeds principal {member.current_loan_principal} "
                f"for member {member.id}; clamping to zero"
            )
            remaining = ZERO
        return member.model_copy(update={"current_loan_principal": remaining})
    # Interest is group revenue, not a member balance
    return member


def compute_organization_stats(transactions: Iterable) -> OrganizationStats:
    """Fold the whole log into the fund's cash position.

    Deposits, interest and repayments bring cash in; loan disbursements take
    it out. Only sums are involved, so the order of the log does not matter.
    """
    org_balance = ZERO
    total_interest_earned = ZERO

    for tx in transactions:
        amount = _to_decimal(tx.amount)
        tx_type = TransactionType(tx.type)
        if tx_type == TransactionType.LOAN_TAKEN:
            org_balance -= amount
        else:
            org_balance += amount
        if tx_type == TransactionType.INTEREST_PAID:
            total_interest_earned += amount

    return OrganizationStats(org_balance=org_balance, total_interest_earned=total_interest_earned)


def compute_loan_cycle_summary(member, transactions: Iterable) -> Optional[LoanCycleSummary]:
    """Summarise repayments and interest since the member's latest loan.

    Returns None when the member has no outstanding principal, or when no
    LoanTaken entry exists to anchor the cycle. A loan topped up before the
    previous one is cleared starts a new cycle, so earlier repayments drop
    out of the summary even though the principal still includes them.
    """
    if _to_decimal(member.current_loan_principal) <= ZERO:
        return None

    member_txs = [tx for tx in transactions if tx.member_id == member.id]
    loans = [tx for tx in member_txs if TransactionType(tx.type) == TransactionType.LOAN_TAKEN]
    if not loans:
        return None

    cycle_start = max(loans, key=lambda tx: tx.date).date
    in_cycle = [tx for tx in member_txs if tx.date >= cycle_start]

    repayments = [tx for tx in in_cycle if TransactionType(tx.type) == TransactionType.LOAN_REPAYMENT]
    interest = [tx for tx in in_cycle if TransactionType(tx.type) == TransactionType.INTEREST_PAID]

    return LoanCycleSummary(
        start_date=cycle_start,
        repayment_count=len(repayments),
        total_principal_repaid=sum((_to_decimal(tx.amount) for tx in repayments), ZERO),
        total_interest_paid=sum((_to_decimal(tx.amount) for tx in interest), ZERO),
    )


def compute_estimated_interest_due(member, settings) -> Decimal:
    """One month's interest on the outstanding principal, rounded to a whole rupee."""
    principal = _to_decimal(member.current_loan_principal)
    rate = _to_decimal(settings.interest_rate)
    return (principal * rate / Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def recompute_member_balances(member, transactions: Iterable) -> MemberResponse:
    """Rebuild a member's balances from zero by replaying their transactions in log order."""
    rebuilt = _as_member(member).model_copy(
        update={"current_loan_principal": ZERO, "total_savings": ZERO}
    )
    for tx in transactions:
        if tx.member_id == rebuilt.id:
            rebuilt = apply_transaction(rebuilt, tx)
    return rebuilt


def compute_dashboard_stats(members: Iterable, transactions: Iterable) -> DashboardStats:
    """Headline figures: active head count, balances across all members, fund position."""
    members = list(members)
    org = compute_organization_stats(transactions)
    return DashboardStats(
        active_members=sum(1 for m in members if m.is_active),
        total_savings=sum((_to_decimal(m.total_savings) for m in members), ZERO),
        total_loans_outstanding=sum((_to_decimal(m.current_loan_principal) for m in members), ZERO),
        org_balance=org.org_balance,
        total_interest_earned=org.total_interest_earned,
    )


def filter_member_history(
    member_id: UUID,
    transactions: Iterable,
    history_filter: HistoryFilter = HistoryFilter.ALL
) -> List:
    """A member's transactions, newest first, narrowed by the history filter."""
    history_filter = HistoryFilter(history_filter)
    filtered = [tx for tx in transactions if tx.member_id == member_id]

    if history_filter == HistoryFilter.LOAN_HISTORY:
        filtered = [tx for tx in filtered if TransactionType(tx.type) in LOAN_HISTORY_TYPES]
    elif history_filter != HistoryFilter.ALL:
        wanted = TransactionType(history_filter.value)
        filtered = [tx for tx in filtered if TransactionType(tx.type) == wanted]

    return sorted(filtered, key=lambda tx: tx.date, reverse=True)


def search_members(members: Iterable, term: Optional[str] = None) -> List:
    """Active members matching a name (case-insensitive) or phone number fragment."""
    active = [m for m in members if m.is_active]
    if not term:
        return active
    needle = term.lower()
    return [m for m in active if needle in m.name.lower() or term in m.phone_number]


def suggest_amount(member, transaction_type: TransactionType, settings) -> Optional[Decimal]:
    """Prefill for the record form: interest due for interest payments, the monthly amount for deposits."""
    transaction_type = TransactionType(transaction_type)
    if transaction_type == TransactionType.INTEREST_PAID:
        due = compute_estimated_interest_due(member, settings)
        return due if due > ZERO else None
    if transaction_type == TransactionType.DEPOSIT:
        return _to_decimal(settings.monthly_savings_amount)
    return None
