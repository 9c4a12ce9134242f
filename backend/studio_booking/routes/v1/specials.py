# backend/studio_booking/routes/v1/specials.py
"""
Specials routes - API v1

Endpoints:
    GET /current                       → The special running today, or null
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends

from ...api.dependencies import get_specials_service
from ...schemas.specials import SpecialResponse
from ...services.specials_service import SpecialsService

router = APIRouter(tags=["specials-v1"])


@router.get("/current", response_model=Optional[SpecialResponse])
async def get_current_special(
    specials_service: SpecialsService = Depends(get_specials_service),
) -> Optional[SpecialResponse]:
    special = await asyncio.to_thread(specials_service.get_current_special)
    return SpecialResponse.model_validate(special) if special is not None else None
