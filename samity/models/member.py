from sqlalchemy import Column, String, Boolean, Integer, Numeric, Uuid
from sqlalchemy.orm import relationship
import uuid
from decimal import Decimal
from samity.db.base import Base
from samity.db.types import UTCDateTime, utcnow


class Member(Base):
    """Samity member with materialised savings and loan balances."""
    __tablename__ = "member"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    seq = Column(Integer, nullable=False, unique=True, index=True)  # insertion order
    name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    # Derived from the transaction log; only changed by recording transactions
    current_loan_principal = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    total_savings = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    joined_date = Column(UTCDateTime(), nullable=False, default=utcnow)

    # Relationships (no cascade: members are soft-deleted only)
    transactions = relationship("Transaction", back_populates="member", order_by="Transaction.seq")
