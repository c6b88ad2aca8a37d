"""
Member lookup for devotional stats.

Members are owned by the membership system; this service only reads them.
"""

import logging
from typing import Optional, Dict, Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class MemberService:
    """Read-only access to the members collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._members_collection = db["members"]

    async def get_member(self, member_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a member by id.

        Returns:
            Member dict (name fields only) or None
        """
        member = await self._members_collection.find_one(
            {"_id": ObjectId(member_id)},
            {"firstName": 1, "lastName": 1}
        )
        if member is None:
            logger.debug(f"Member not found: {member_id}")
        return member
