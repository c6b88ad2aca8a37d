"""
Devotional achievement unlock persistence.

Records when a member first earned each badge so the earned date stays
stable across stats requests.
"""

import logging
from datetime import date, datetime, timezone
from typing import Dict, Any, Optional, Mapping

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from sycamore.devotional.engagement import unlock_timestamp

logger = logging.getLogger(__name__)


class AchievementService:
    """
    Stores one unlock record per (userId, achievementId).

    Unlocks are never removed: once earned, a badge keeps its original
    unlock timestamp.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize AchievementService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._achievements_collection = db["devotionalAchievements"]

    async def ensure_indexes(self) -> None:
        await self._achievements_collection.create_index(
            [("userId", ASCENDING), ("achievementId", ASCENDING)],
            unique=True,
            name="user_achievement_unique",
        )

    async def get_unlocks(self, user_id: str) -> Dict[str, datetime]:
        """
        Get persisted unlock timestamps for a user.

        Returns:
            dict mapping achievement id to unlockedAt
        """
        cursor = self._achievements_collection.find(
            {"userId": ObjectId(user_id)},
            {"achievementId": 1, "unlockedAt": 1}
        )
        docs = await cursor.to_list(length=None)
        return {doc["achievementId"]: doc["unlockedAt"] for doc in docs}

    async def record_unlocks(
        self,
        user_id: str,
        stats: Dict[str, Any],
        unlocked_at: Optional[datetime] = None,
        known: Optional[Mapping[str, datetime]] = None,
        unlock_days: Optional[Mapping[str, date]] = None,
    ) -> Dict[str, datetime]:
        """
        Persist badges earned in freshly computed stats.

        Args:
            user_id: MongoDB user ID
            stats: Engagement stats containing an ``achievements`` list
            unlocked_at: Current time (defaults to now)
            known: Already persisted unlocks, to skip redundant writes
            unlock_days: Day each badge's threshold was crossed; badges
                crossed on an earlier day are dated to that day

        Returns:
            Merged unlock map including the badges recorded by this call
        """
        unlocked_at = unlocked_at or datetime.now(timezone.utc)
        unlock_days = unlock_days or {}
        unlocks = dict(known) if known is not None else await self.get_unlocks(user_id)

        for achievement in stats.get("achievements", []):
            achievement_id = achievement["id"]
            if not achievement.get("earned") or achievement_id in unlocks:
                continue

            day = unlock_days.get(achievement_id)
            timestamp = unlock_timestamp(day, unlocked_at) if day else unlocked_at
            unlocks[achievement_id] = await self.record_unlock(user_id, achievement_id, timestamp)

        return unlocks

    async def record_unlock(
        self,
        user_id: str,
        achievement_id: str,
        unlocked_at: datetime,
    ) -> datetime:
        """
        Insert an unlock unless one exists.

        Returns:
            The stored unlockedAt, which is the earlier record's timestamp
            when the badge was already unlocked
        """
        user_oid = ObjectId(user_id)
        previous = await self._achievements_collection.find_one_and_update(
            {"userId": user_oid, "achievementId": achievement_id},
            {
                "$setOnInsert": {
                    "userId": user_oid,
                    "achievementId": achievement_id,
                    "unlockedAt": unlocked_at,
                }
            },
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )

        # No previous document means this call inserted the unlock
        if previous is None:
            logger.info(f"Achievement {achievement_id} unlocked for user {user_id}")
            return unlocked_at
        return previous["unlockedAt"]
