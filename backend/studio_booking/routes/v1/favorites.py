# backend/studio_booking/routes/v1/favorites.py
"""
Favorites routes - API v1

Endpoints:
    GET /                              → List the user's favorite classes
    GET /{class_id}                    → Whether a class is favorited
    POST /{class_id}                   → Add a class to favorites
    DELETE /{class_id}                 → Remove a class from favorites
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Path

from ...api.dependencies import get_current_user, get_favorites_service
from ...core.constants import ULID_PATH_PATTERN
from ...models.user import User
from ...schemas.favorites import (
    FavoritedClass,
    FavoriteResponse,
    FavoritesList,
    FavoriteStatusResponse,
)
from ...schemas.schedule import ClassResponse
from ...services.favorites_service import FavoritesService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["favorites-v1"])


@router.get("", response_model=FavoritesList)
async def get_favorites(
    current_user: User = Depends(get_current_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> FavoritesList:
    favorites = await asyncio.to_thread(favorites_service.list_favorites, current_user.id)
    items = [
        FavoritedClass(
            favorite_id=f.id,
            favorited_at=f.created_at,
            class_info=ClassResponse.model_validate(f.class_instance),
        )
        for f in favorites
    ]
    return FavoritesList(favorites=items, total=len(items))


@router.get("/{class_id}", response_model=FavoriteStatusResponse)
async def check_favorite(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteStatusResponse:
    is_fav = await asyncio.to_thread(favorites_service.is_favorited, current_user.id, class_id)
    return FavoriteStatusResponse(class_id=class_id, is_favorited=is_fav)


@router.post("/{class_id}", response_model=FavoriteResponse)
async def add_favorite(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteResponse:
    result = await asyncio.to_thread(favorites_service.add_favorite, current_user.id, class_id)
    return FavoriteResponse(**result)


@router.delete("/{class_id}", response_model=FavoriteResponse)
async def remove_favorite(
    class_id: str = Path(..., pattern=ULID_PATH_PATTERN),
    current_user: User = Depends(get_current_user),
    favorites_service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteResponse:
    result = await asyncio.to_thread(
        favorites_service.remove_favorite, current_user.id, class_id
    )
    return FavoriteResponse(**result)
