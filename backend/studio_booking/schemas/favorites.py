"""
Pydantic schemas for favorites functionality.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .schedule import ClassResponse


class FavoriteResponse(BaseModel):
    """Response for favorite add/remove operations."""

    success: bool = Field(..., description="Whether the operation was successful")
    message: str = Field(..., description="Human-readable message about the operation")
    favorite_id: Optional[str] = Field(
        None, description="ID of the created favorite (for add operations)"
    )
    already_favorited: Optional[bool] = Field(
        None, description="True if already favorited (for add)"
    )
    not_favorited: Optional[bool] = Field(None, description="True if not favorited (for remove)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Class added to favorites",
                "favorite_id": "01K2K8CVN3A55280PFKJD9YHKV",
            }
        }
    )


class FavoritedClass(BaseModel):
    favorite_id: str
    favorited_at: Optional[datetime] = None
    class_info: ClassResponse = Field(..., serialization_alias="class")


class FavoritesList(BaseModel):
    favorites: List[FavoritedClass]
    total: int


class FavoriteStatusResponse(BaseModel):
    class_id: str
    is_favorited: bool
