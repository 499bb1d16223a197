from sqlalchemy import Column, Integer, Numeric
from samity.db.base import Base
from samity.db.types import UTCDateTime, utcnow


class SamitySettings(Base):
    """Group-wide settings (single row)."""
    __tablename__ = "samity_settings"

    id = Column(Integer, primary_key=True, default=1)
    interest_rate = Column(Numeric(5, 2), nullable=False)  # percent per month on outstanding principal
    monthly_savings_amount = Column(Numeric(12, 2), nullable=False)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow, onupdate=utcnow)
