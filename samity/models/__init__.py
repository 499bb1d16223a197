from samity.db.base import Base

# Import all models so Alembic can detect them
from samity.models.member import Member
from samity.models.transaction import Transaction, TransactionType
from samity.models.system import SamitySettings

__all__ = [
    "Base",
    "Member",
    "Transaction",
    "TransactionType",
    "SamitySettings",
]
