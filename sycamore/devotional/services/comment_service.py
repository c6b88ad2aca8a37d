"""
Devotional comment service.

Comments live in ``devotionalComments``; author names and avatars are
read from ``members`` when comments are returned.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from common.utils.exceptions import InternalServerException

logger = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown User"


class CommentService:
    """Handles posting and listing comments on devotionals."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize CommentService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._comments_collection = db["devotionalComments"]
        self._members_collection = db["members"]

    async def ensure_indexes(self) -> None:
        await self._comments_collection.create_index(
            [("devotionalId", ASCENDING), ("createdAt", DESCENDING)],
            name="devotional_created",
        )

    async def get_comments(self, devotional_id: str) -> List[Dict[str, Any]]:
        """
        Get all comments on a devotional, newest first, with their authors.

        Returns:
            List of formatted comment dicts
        """
        cursor = self._comments_collection.find(
            {"devotionalId": devotional_id}
        ).sort("createdAt", DESCENDING)
        comments = await cursor.to_list(length=None)

        authors = await self._get_authors({c["userId"] for c in comments})
        return [
            self._format_comment(c, authors.get(c["userId"]))
            for c in comments
        ]

    async def add_comment(
        self,
        devotional_id: str,
        user_id: str,
        content: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Post a comment as ``user_id``.

        Returns:
            The formatted comment, including its author

        Raises:
            InternalServerException: Insert was not acknowledged
        """
        user_oid = ObjectId(user_id)
        comment = {
            "content": content,
            "devotionalId": devotional_id,
            "userId": user_oid,
            "createdAt": now or datetime.now(timezone.utc),
            "likes": 0,
        }

        result = await self._comments_collection.insert_one(comment)
        if not result.inserted_id:
            raise InternalServerException(
                message="Failed to create comment",
                code="COMMENT_NOT_CREATED",
            )
        comment["_id"] = result.inserted_id

        logger.info(f"User {user_id} commented on devotional {devotional_id}")

        authors = await self._get_authors({user_oid})
        return self._format_comment(comment, authors.get(user_oid))

    async def _get_authors(self, user_ids) -> Dict[Any, Dict[str, Any]]:
        """Members keyed by _id, for the given user ids."""
        if not user_ids:
            return {}
        cursor = self._members_collection.find(
            {"_id": {"$in": list(user_ids)}},
            {"firstName": 1, "lastName": 1, "profilePicture": 1},
        )
        members = await cursor.to_list(length=None)
        return {m["_id"]: m for m in members}

    @staticmethod
    def _format_comment(
        comment: Dict[str, Any],
        author: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        name = UNKNOWN_AUTHOR
        avatar = None
        if author:
            full_name = f"{author.get('firstName', '')} {author.get('lastName', '')}".strip()
            name = full_name or UNKNOWN_AUTHOR
            avatar = author.get("profilePicture")

        return {
            "id": str(comment["_id"]),
            "content": comment["content"],
            "devotionalId": comment["devotionalId"],
            "userId": str(comment["userId"]),
            "author": name,
            "avatar": avatar,
            "timestamp": comment.get("createdAt"),
            "likes": comment.get("likes", 0),
            # Comment likes are not tracked per member
            "isLiked": False,
        }
