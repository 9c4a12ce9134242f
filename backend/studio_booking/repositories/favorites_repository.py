"""
Favorites Repository for the studio booking core.

Handles database operations for users bookmarking classes.
"""

import logging
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session, joinedload

from ..models.favorite import UserFavorite
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class FavoritesRepository(BaseRepository[UserFavorite]):
    def __init__(self, db: Session):
        super().__init__(db, UserFavorite)

    def get_favorite(self, user_id: str, class_id: str) -> Optional[UserFavorite]:
        return (
            self.db.query(UserFavorite)
            .filter(and_(UserFavorite.user_id == user_id, UserFavorite.class_id == class_id))
            .first()
        )

    def is_favorited(self, user_id: str, class_id: str) -> bool:
        return self.get_favorite(user_id, class_id) is not None

    def add_favorite(self, user_id: str, class_id: str) -> Optional[UserFavorite]:
        """
        Add a class to a user's favorites.

        Returns:
            The new UserFavorite, or None if the pair already exists
        """
        if self.is_favorited(user_id, class_id):
            self.logger.info(f"User {user_id} already favorited class {class_id}")
            return None
        return self.create(user_id=user_id, class_id=class_id)

    def remove_favorite(self, user_id: str, class_id: str) -> bool:
        favorite = self.get_favorite(user_id, class_id)
        if favorite is None:
            return False
        self.db.delete(favorite)
        self.db.flush()
        return True

    def list_for_user(self, user_id: str) -> List[UserFavorite]:
        return (
            self.db.query(UserFavorite)
            .options(joinedload(UserFavorite.class_instance))
            .filter(UserFavorite.user_id == user_id)
            .order_by(UserFavorite.created_at.desc(), UserFavorite.id.desc())
            .all()
        )
