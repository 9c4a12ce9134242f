# backend/studio_booking/routes/v1/passes.py
"""
Pass routes - API v1

Endpoints:
    GET /                              → All of the current user's passes
    GET /active                        → The pass a booking would be charged to
    GET /wallet                        → Balance summary for the wallet screen
"""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user, get_pass_ledger_service
from ...models.user import User
from ...schemas.passes import PassResponse, WalletSummaryResponse
from ...services.pass_ledger_service import PassLedgerService

router = APIRouter(tags=["passes-v1"])


@router.get("", response_model=List[PassResponse])
async def list_passes(
    current_user: User = Depends(get_current_user),
    ledger: PassLedgerService = Depends(get_pass_ledger_service),
) -> List[PassResponse]:
    passes = await asyncio.to_thread(ledger.list_passes, current_user.id)
    return [PassResponse.model_validate(p) for p in passes]


@router.get("/active", response_model=Optional[PassResponse])
async def get_active_pass(
    current_user: User = Depends(get_current_user),
    ledger: PassLedgerService = Depends(get_pass_ledger_service),
) -> Optional[PassResponse]:
    active = await asyncio.to_thread(ledger.get_active_pass, current_user.id)
    return PassResponse.model_validate(active) if active is not None else None


@router.get("/wallet", response_model=WalletSummaryResponse)
async def get_wallet(
    current_user: User = Depends(get_current_user),
    ledger: PassLedgerService = Depends(get_pass_ledger_service),
) -> WalletSummaryResponse:
    def _load():
        return ledger.get_wallet_summary(current_user.id), ledger.list_passes(current_user.id)

    summary, passes = await asyncio.to_thread(_load)
    return WalletSummaryResponse(
        active_pass=(
            PassResponse.model_validate(summary.active_pass) if summary.active_pass else None
        ),
        balance=summary.balance,
        is_unlimited=summary.is_unlimited,
        low_credit=summary.low_credit,
        days_remaining=summary.days_remaining,
        passes=[PassResponse.model_validate(p) for p in passes],
    )
