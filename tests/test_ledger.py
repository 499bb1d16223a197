import itertools
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from samity.models.transaction import TransactionType
from samity.schemas.member import MemberResponse
from samity.schemas.settings import SettingsResponse
from samity.schemas.transaction import HistoryFilter, TransactionResponse
from samity.services import ledger
from samity.services.ledger import InvalidAmount, UnknownMemberReference

START = datetime(2024, 1, 1, 9, 0, 0)


def make_member(name="Asha Sen", phone_number="9000000001", **balances):
    return MemberResponse(
        id=uuid.uuid4(),
        name=name,
        phone_number=phone_number,
        joined_date=START,
        **balances,
    )


def make_tx(member, tx_type, amount, days=0, note=None):
    return TransactionResponse(
        id=uuid.uuid4(),
        member_id=member.id,
        date=START + timedelta(days=days),
        type=tx_type,
        amount=Decimal(str(amount)),
        note=note,
    )


def default_settings(interest_rate="5.0", monthly_savings_amount="100"):
    return SettingsResponse(
        interest_rate=Decimal(interest_rate),
        monthly_savings_amount=Decimal(monthly_savings_amount),
    )


# ---------------------------------------------------------------------------
# apply_transaction
# ---------------------------------------------------------------------------

def test_deposit_adds_to_savings():
    member = make_member()
    updated = ledger.apply_transaction(member, make_tx(member, TransactionType.DEPOSIT, 100))
    assert updated.total_savings == Decimal("100")
    assert updated.current_loan_principal == Decimal("0")


def test_loan_and_repayment_move_principal():
    member = make_member()
    member = ledger.apply_transaction(member, make_tx(member, TransactionType.LOAN_TAKEN, 5000))
    assert member.current_loan_principal == Decimal("5000")

    member = ledger.apply_transaction(member, make_tx(member, TransactionType.LOAN_REPAYMENT, 2000, days=30))
    assert member.current_loan_principal == Decimal("3000")


def test_interest_paid_leaves_balances_alone():
    member = make_member(current_loan_principal=Decimal("3000"), total_savings=Decimal("400"))
    updated = ledger.apply_transaction(member, make_tx(member, TransactionType.INTEREST_PAID, 150))
    assert updated.current_loan_principal == Decimal("3000")
    assert updated.total_savings == Decimal("400")


def test_repayment_above_principal_clamps_to_zero():
    member = make_member(current_loan_principal=Decimal("300"))
    updated = ledger.apply_transaction(member, make_tx(member, TransactionType.LOAN_REPAYMENT, 500))
    assert updated.current_loan_principal == Decimal("0")


def test_apply_returns_new_member_and_keeps_input():
    member = make_member()
    updated = ledger.apply_transaction(member, make_tx(member, TransactionType.DEPOSIT, 100))
    assert updated is not member
    assert member.total_savings == Decimal("0")


@pytest.mark.parametrize("amount", [0, -50])
def test_non_positive_amount_is_rejected(amount):
    member = make_member()
    with pytest.raises(InvalidAmount):
        ledger.apply_transaction(member, make_tx(member, TransactionType.DEPOSIT, amount))


@pytest.mark.parametrize("amount", ["0.004", "99.999"])
def test_amount_finer_than_one_paisa_is_rejected(amount):
    member = make_member(current_loan_principal=Decimal("100"))
    with pytest.raises(InvalidAmount):
        ledger.apply_transaction(member, make_tx(member, TransactionType.LOAN_REPAYMENT, amount))


def test_validate_amount():
    assert ledger.validate_amount("12.50") == Decimal("12.50")
    assert ledger.validate_amount(Decimal("100")) == Decimal("100")
    for bad in ["abc", "NaN", "Infinity", "0.001"]:
        with pytest.raises(InvalidAmount):
            ledger.validate_amount(bad)


def test_transaction_for_another_member_is_rejected():
    member = make_member()
    other = make_member(name="Bina")
    with pytest.raises(UnknownMemberReference):
        ledger.apply_transaction(member, make_tx(other, TransactionType.DEPOSIT, 100))


# ---------------------------------------------------------------------------
# compute_organization_stats
# ---------------------------------------------------------------------------

def test_organization_stats_cash_flow():
    member = make_member()
    txs = [
        make_tx(member, TransactionType.DEPOSIT, 1000),
        make_tx(member, TransactionType.LOAN_TAKEN, 5000, days=1),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 2000, days=30),
        make_tx(member, TransactionType.INTEREST_PAID, 150, days=30),
    ]
    stats = ledger.compute_organization_stats(txs)
    assert stats.org_balance == Decimal("-1850")
    assert stats.total_interest_earned == Decimal("150")


def test_organization_stats_ignore_order():
    member = make_member()
    txs = [
        make_tx(member, TransactionType.DEPOSIT, 100),
        make_tx(member, TransactionType.LOAN_TAKEN, 700, days=1),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 250, days=2),
        make_tx(member, TransactionType.INTEREST_PAID, 35, days=2),
    ]
    expected = ledger.compute_organization_stats(txs)
    for permutation in itertools.permutations(txs):
        assert ledger.compute_organization_stats(permutation) == expected


def test_organization_stats_of_empty_log():
    stats = ledger.compute_organization_stats([])
    assert stats.org_balance == Decimal("0")
    assert stats.total_interest_earned == Decimal("0")


# ---------------------------------------------------------------------------
# compute_loan_cycle_summary
# ---------------------------------------------------------------------------

def test_no_cycle_without_outstanding_principal():
    member = make_member()
    txs = [
        make_tx(member, TransactionType.LOAN_TAKEN, 1000),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 1000, days=30),
    ]
    assert ledger.compute_loan_cycle_summary(member, txs) is None


def test_no_cycle_when_no_loan_was_recorded():
    member = make_member(current_loan_principal=Decimal("500"))
    txs = [make_tx(member, TransactionType.DEPOSIT, 100)]
    assert ledger.compute_loan_cycle_summary(member, txs) is None


def test_cycle_summary_counts_repayments_and_interest():
    member = make_member(current_loan_principal=Decimal("3000"))
    other = make_member(name="Bina")
    txs = [
        make_tx(member, TransactionType.LOAN_TAKEN, 5000, days=1),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 1000, days=30),
        make_tx(member, TransactionType.INTEREST_PAID, 250, days=30),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 1000, days=60),
        make_tx(member, TransactionType.INTEREST_PAID, 200, days=60),
        make_tx(member, TransactionType.DEPOSIT, 100, days=60),
        make_tx(other, TransactionType.LOAN_REPAYMENT, 999, days=60),
    ]
    summary = ledger.compute_loan_cycle_summary(member, txs)
    assert summary.start_date == START + timedelta(days=1)
    assert summary.repayment_count == 2
    assert summary.total_principal_repaid == Decimal("2000")
    assert summary.total_interest_paid == Decimal("450")


def test_cycle_starts_at_latest_loan():
    # Top-up loan before the first is cleared: earlier repayments drop out
    member = make_member(current_loan_principal=Decimal("4500"))
    txs = [
        make_tx(member, TransactionType.LOAN_TAKEN, 3000),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 1000, days=30),
        make_tx(member, TransactionType.INTEREST_PAID, 150, days=30),
        make_tx(member, TransactionType.LOAN_TAKEN, 2000, days=45),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 500, days=60),
    ]
    summary = ledger.compute_loan_cycle_summary(member, txs)
    assert summary.start_date == START + timedelta(days=45)
    assert summary.repayment_count == 1
    assert summary.total_principal_repaid == Decimal("500")
    assert summary.total_interest_paid == Decimal("0")


def test_cycle_uses_latest_date_not_log_position():
    member = make_member(current_loan_principal=Decimal("1000"))
    txs = [
        make_tx(member, TransactionType.LOAN_TAKEN, 600, days=20),
        make_tx(member, TransactionType.LOAN_TAKEN, 400, days=5),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 100, days=10),
    ]
    summary = ledger.compute_loan_cycle_summary(member, txs)
    assert summary.start_date == START + timedelta(days=20)
    assert summary.repayment_count == 0


# ---------------------------------------------------------------------------
# compute_estimated_interest_due
# ---------------------------------------------------------------------------

def test_estimated_interest_due():
    member = make_member(current_loan_principal=Decimal("3000"))
    assert ledger.compute_estimated_interest_due(member, default_settings()) == Decimal("150")


def test_estimated_interest_rounds_half_up():
    member = make_member(current_loan_principal=Decimal("1010"))
    assert ledger.compute_estimated_interest_due(member, default_settings()) == Decimal("51")

    member = make_member(current_loan_principal=Decimal("1234"))
    assert ledger.compute_estimated_interest_due(member, default_settings("2.5")) == Decimal("31")


def test_estimated_interest_without_loan_is_zero():
    assert ledger.compute_estimated_interest_due(make_member(), default_settings()) == Decimal("0")


# ---------------------------------------------------------------------------
# recompute_member_balances
# ---------------------------------------------------------------------------

def test_recompute_matches_sums_of_log():
    member = make_member()
    other = make_member(name="Bina")
    txs = [
        make_tx(member, TransactionType.DEPOSIT, 100),
        make_tx(member, TransactionType.LOAN_TAKEN, 2000, days=1),
        make_tx(other, TransactionType.DEPOSIT, 300, days=1),
        make_tx(member, TransactionType.DEPOSIT, 100, days=30),
        make_tx(member, TransactionType.LOAN_REPAYMENT, 500, days=30),
        make_tx(member, TransactionType.INTEREST_PAID, 100, days=30),
    ]
    rebuilt = ledger.recompute_member_balances(member, txs)
    assert rebuilt.total_savings == Decimal("200")
    assert rebuilt.current_loan_principal == Decimal("1500")


def test_recompute_ignores_stale_stored_balances():
    member = make_member(total_savings=Decimal("999"), current_loan_principal=Decimal("999"))
    rebuilt = ledger.recompute_member_balances(member, [make_tx(member, TransactionType.DEPOSIT, 50)])
    assert rebuilt.total_savings == Decimal("50")
    assert rebuilt.current_loan_principal == Decimal("0")


# ---------------------------------------------------------------------------
# dashboard, history, search, suggestions
# ---------------------------------------------------------------------------

def test_dashboard_stats():
    active = make_member(total_savings=Decimal("500"), current_loan_principal=Decimal("1000"))
    inactive = make_member(name="Bina", is_active=False, total_savings=Decimal("200"))
    txs = [
        make_tx(active, TransactionType.DEPOSIT, 500),
        make_tx(inactive, TransactionType.DEPOSIT, 200),
        make_tx(active, TransactionType.LOAN_TAKEN, 1000, days=1),
        make_tx(active, TransactionType.INTEREST_PAID, 50, days=30),
    ]
    stats = ledger.compute_dashboard_stats([active, inactive], txs)
    assert stats.active_members == 1
    assert stats.total_savings == Decimal("700")
    assert stats.total_loans_outstanding == Decimal("1000")
    assert stats.org_balance == Decimal("-250")
    assert stats.total_interest_earned == Decimal("50")


def test_history_newest_first_and_filtered():
    member = make_member()
    other = make_member(name="Bina")
    deposit = make_tx(member, TransactionType.DEPOSIT, 100)
    loan = make_tx(member, TransactionType.LOAN_TAKEN, 1000, days=2)
    repayment = make_tx(member, TransactionType.LOAN_REPAYMENT, 200, days=9)
    interest = make_tx(member, TransactionType.INTEREST_PAID, 50, days=5)
    txs = [deposit, loan, repayment, interest, make_tx(other, TransactionType.DEPOSIT, 100, days=3)]

    assert ledger.filter_member_history(member.id, txs) == [repayment, interest, loan, deposit]
    assert ledger.filter_member_history(member.id, txs, HistoryFilter.LOAN_HISTORY) == [repayment, interest, loan]
    assert ledger.filter_member_history(member.id, txs, HistoryFilter.DEPOSIT) == [deposit]
    assert ledger.filter_member_history(member.id, txs, "InterestPaid") == [interest]


def test_search_members_by_name_or_phone():
    asha = make_member(name="Asha Sen", phone_number="9000000001")
    bina = make_member(name="Bina Roy", phone_number="9111100002")
    gone = make_member(name="Ashok Pal", phone_number="9000000003", is_active=False)
    members = [asha, bina, gone]

    assert ledger.search_members(members, "asha") == [asha]
    assert ledger.search_members(members, "ASH") == [asha]
    assert ledger.search_members(members, "91111") == [bina]
    assert ledger.search_members(members, "") == [asha, bina]
    assert ledger.search_members(members, None) == [asha, bina]


def test_suggest_amount():
    borrower = make_member(current_loan_principal=Decimal("3000"))
    saver = make_member(name="Bina")
    settings = default_settings(monthly_savings_amount="250")

    assert ledger.suggest_amount(borrower, TransactionType.INTEREST_PAID, settings) == Decimal("150")
    assert ledger.suggest_amount(saver, TransactionType.INTEREST_PAID, settings) is None
    assert ledger.suggest_amount(saver, TransactionType.DEPOSIT, settings) == Decimal("250")
    assert ledger.suggest_amount(saver, TransactionType.LOAN_TAKEN, settings) is None
