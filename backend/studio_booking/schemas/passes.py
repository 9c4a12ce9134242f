"""
Pydantic schemas for passes, wallet summaries and purchases.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, model_validator

from ..core.enums import PassStatus, PassType
from .base import StandardizedModel, StrictModel


class PassResponse(StandardizedModel):
    id: str
    pass_type: PassType
    pass_name: str
    remaining_credits: int
    balance: Optional[int] = Field(None, description="Bookable credits; null for unlimited")
    valid_from: datetime
    valid_until: datetime
    status: PassStatus
    is_active: bool

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class WalletSummaryResponse(StandardizedModel):
    active_pass: Optional[PassResponse] = None
    balance: Optional[int] = None
    is_unlimited: bool = False
    low_credit: bool = False
    days_remaining: Optional[int] = None
    passes: List[PassResponse] = Field(default_factory=list)


class PassPurchaseRequest(StrictModel):
    """
    Purchase confirmed by the payment collaborator.

    ``reference`` is the payment's id; replays with the same reference are
    applied once.
    """

    user_id: str = Field(..., min_length=26, max_length=26)
    pass_type: PassType
    pass_name: str = Field(..., min_length=1, max_length=100)
    credits: int = Field(0, ge=0, le=1000)
    duration_days: int = Field(..., gt=0, le=3660)
    reference: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def _check_credits(self) -> "PassPurchaseRequest":
        if self.pass_type == PassType.PACK and self.credits <= 0:
            raise ValueError("Pack passes need at least one credit")
        return self


class ExpirePassesResponse(StandardizedModel):
    expired: int
