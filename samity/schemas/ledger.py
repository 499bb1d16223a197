from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
from decimal import Decimal
from uuid import UUID


class OrganizationStats(BaseModel):
    """Cash position of the shared fund, folded over the whole log."""
    org_balance: Decimal = Decimal("0")
    total_interest_earned: Decimal = Decimal("0")


class LoanCycleSummary(BaseModel):
    """Activity since the member's most recent loan disbursement."""
    start_date: datetime
    repayment_count: int = 0
    total_principal_repaid: Decimal = Decimal("0")
    total_interest_paid: Decimal = Decimal("0")


class DashboardStats(OrganizationStats):
    active_members: int = 0
    total_savings: Decimal = Decimal("0")
    total_loans_outstanding: Decimal = Decimal("0")


class BalanceDiscrepancy(BaseModel):
    member_id: UUID
    stored_savings: Decimal
    derived_savings: Decimal
    stored_principal: Decimal
    derived_principal: Decimal


class LedgerIntegrityReport(BaseModel):
    """Stored balances checked against a full recomputation from the log."""
    members_checked: int = 0
    consistent: bool = True
    discrepancies: List[BalanceDiscrepancy] = Field(default_factory=list)
