from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from samity.schemas.transaction import TransactionResponse
from samity.schemas.ledger import LoanCycleSummary


class MemberResponse(BaseModel):
    id: UUID
    name: str
    phone_number: str
    is_active: bool = True
    current_loan_principal: Decimal = Decimal("0")
    total_savings: Decimal = Decimal("0")
    joined_date: datetime

    class Config:
        from_attributes = True
        frozen = True


class MemberUpsert(BaseModel):
    """Add a member (no id) or edit name/phone of an existing one."""
    id: Optional[UUID] = Field(None, description="Existing member id; omit to create a new member")
    name: str = Field(..., description="Display name")
    phone_number: str = Field(..., description="Contact phone number")


class MemberBulkDeleteRequest(BaseModel):
    member_ids: List[UUID]


class MemberOverview(BaseModel):
    """Everything the member detail view needs in one payload."""
    member: MemberResponse
    estimated_interest_due: Decimal
    loan_cycle: Optional[LoanCycleSummary] = None
    history: List[TransactionResponse] = Field(default_factory=list)


class SuggestedAmountResponse(BaseModel):
    amount: Optional[Decimal] = None
