from sqlalchemy import Column, String, ForeignKey, Integer, Numeric, Enum as SQLEnum, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
import uuid
import enum
from samity.db.base import Base
from samity.db.types import UTCDateTime, utcnow


class TransactionType(str, enum.Enum):
    """Kinds of ledger transaction."""
    DEPOSIT = "Deposit"
    LOAN_TAKEN = "LoanTaken"
    LOAN_REPAYMENT = "LoanRepayment"
    INTEREST_PAID = "InterestPaid"


class Transaction(Base):
    """Append-only ledger entry against a member."""
    __tablename__ = "ledger_transaction"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    seq = Column(Integer, nullable=False, unique=True, index=True)  # recording order
    member_id = Column(Uuid(as_uuid=True), ForeignKey("member.id"), nullable=False, index=True)
    date = Column(UTCDateTime(), nullable=False, default=utcnow, index=True)
    type = Column(SQLEnum(TransactionType, native_enum=False, values_callable=lambda obj: [e.value for e in obj]), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    note = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_transaction_amount_positive"),
    )

    # Relationships
    member = relationship("Member", back_populates="transactions")
