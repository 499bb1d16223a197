from pydantic import BaseModel, Field
from typing import List
from samity.schemas.member import MemberResponse
from samity.schemas.transaction import TransactionResponse
from samity.schemas.settings import SettingsResponse


class SamitySnapshot(BaseModel):
    """Fresh copy of all persisted state, returned after every mutation."""
    members: List[MemberResponse] = Field(default_factory=list)
    transactions: List[TransactionResponse] = Field(default_factory=list)
    settings: SettingsResponse
