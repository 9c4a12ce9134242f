# backend/studio_booking/routes/v1/streaks.py
"""
Streak routes - API v1

Endpoints:
    GET /?timeframe=3_months           → Streaks, achievements and activity calendar
"""

import asyncio
from typing import Literal

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_current_user, get_streak_service
from ...models.user import User
from ...schemas.streaks import StreakResponse
from ...services.streak_service import StreakService

router = APIRouter(tags=["streaks-v1"])


@router.get("", response_model=StreakResponse)
async def get_streaks(
    timeframe: Literal["weekly", "monthly", "3_months", "yearly"] = Query("3_months"),
    current_user: User = Depends(get_current_user),
    streak_service: StreakService = Depends(get_streak_service),
) -> StreakResponse:
    stats = await asyncio.to_thread(
        streak_service.get_streaks, current_user.id, timeframe=timeframe
    )
    return StreakResponse.model_validate(stats)
