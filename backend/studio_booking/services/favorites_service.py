"""
Favorites Service for the studio booking core.

Lets a user bookmark classes so the schedule can highlight them.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ClassNotFoundException, UserNotFoundException
from ..models.favorite import UserFavorite
from ..repositories.factory import RepositoryFactory
from ..repositories.favorites_repository import FavoritesRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class FavoritesService(BaseService):
    """Service for managing a user's favorite classes."""

    def __init__(
        self,
        db: Session,
        favorites_repository: Optional[FavoritesRepository] = None,
    ):
        super().__init__(db)
        self.favorites_repository = (
            favorites_repository or RepositoryFactory.create_favorites_repository(db)
        )
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.class_repository = RepositoryFactory.create_class_repository(db)

    @BaseService.measure_operation("add_favorite")
    def add_favorite(self, user_id: str, class_id: str) -> Dict[str, Any]:
        """
        Add a class to a user's favorites.

        Returns:
            Dictionary with success status and message

        Raises:
            UserNotFoundException, ClassNotFoundException
        """
        self.log_operation("add_favorite", user_id=user_id, class_id=class_id)
        self._validate(user_id, class_id)

        favorite = self.run_atomic(
            "add_favorite", lambda: self.favorites_repository.add_favorite(user_id, class_id)
        )
        if favorite is None:
            return {
                "success": False,
                "message": "Class already in favorites",
                "already_favorited": True,
            }
        return {"success": True, "message": "Class added to favorites", "favorite_id": favorite.id}

    @BaseService.measure_operation("remove_favorite")
    def remove_favorite(self, user_id: str, class_id: str) -> Dict[str, Any]:
        self.log_operation("remove_favorite", user_id=user_id, class_id=class_id)
        self._validate(user_id, class_id)

        removed = self.run_atomic(
            "remove_favorite",
            lambda: self.favorites_repository.remove_favorite(user_id, class_id),
        )
        if removed:
            return {"success": True, "message": "Class removed from favorites"}
        return {"success": False, "message": "Class not in favorites", "not_favorited": True}

    def is_favorited(self, user_id: str, class_id: str) -> bool:
        return self.favorites_repository.is_favorited(user_id, class_id)

    @BaseService.measure_operation("list_favorites")
    def list_favorites(self, user_id: str) -> List[UserFavorite]:
        if self.user_repository.get_by_id(user_id) is None:
            raise UserNotFoundException(user_id)
        favorites = self.favorites_repository.list_for_user(user_id)
        self.logger.info(f"Retrieved {len(favorites)} favorites for user {user_id}")
        return favorites

    def _validate(self, user_id: str, class_id: str) -> None:
        if self.user_repository.get_by_id(user_id) is None:
            raise UserNotFoundException(user_id)
        if self.class_repository.get_by_id(class_id) is None:
            raise ClassNotFoundException(class_id)
