"""
Devotional like service.

Toggle-style likes with one record per (devotionalId, userId).
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

logger = logging.getLogger(__name__)


class LikeService:
    """Handles liking and unliking devotionals."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize LikeService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._likes_collection = db["devotionalLikes"]

    async def ensure_indexes(self) -> None:
        await self._likes_collection.create_index(
            [("devotionalId", ASCENDING), ("userId", ASCENDING)],
            unique=True,
            name="devotional_user_unique",
        )

    async def toggle_like(self, devotional_id: str, user_id: str) -> Dict[str, Any]:
        """
        Like a devotional, or remove the like if it already exists.

        Returns:
            dict with liked (state after the toggle) and likeCount
        """
        query = {"devotionalId": devotional_id, "userId": ObjectId(user_id)}

        existing = await self._likes_collection.find_one(query)
        if existing:
            await self._likes_collection.delete_one(query)
            liked = False
        else:
            try:
                await self._likes_collection.insert_one({
                    **query,
                    "createdAt": datetime.now(timezone.utc),
                })
            except DuplicateKeyError:
                # A concurrent request inserted the same like first
                logger.debug(f"Like already recorded for user {user_id} on devotional {devotional_id}")
            liked = True

        like_count = await self._likes_collection.count_documents(
            {"devotionalId": devotional_id}
        )

        logger.info(
            f"User {user_id} {'liked' if liked else 'unliked'} devotional {devotional_id}"
        )
        return {"liked": liked, "likeCount": like_count}

    async def get_like_status(
        self,
        devotional_id: str,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get like count and, for a known user, whether they liked it.

        Returns:
            dict with likeCount and isLiked
        """
        like_count = await self._likes_collection.count_documents(
            {"devotionalId": devotional_id}
        )

        is_liked = False
        if user_id:
            user_like = await self._likes_collection.find_one({
                "devotionalId": devotional_id,
                "userId": ObjectId(user_id),
            })
            is_liked = user_like is not None

        return {"likeCount": like_count, "isLiked": is_liked}
