"""
Devotional topic aggregation.

Counts the tags of the devotionals a member has read.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class TopicService:
    """Aggregates reading topics from devotional tags."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize TopicService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._devotionals_collection = db["devotionals"]

    async def get_topic_counts(self, readings: Iterable[Dict[str, Any]]) -> Dict[str, int]:
        """
        Count topics across the devotionals referenced by readings.

        Each reading contributes once per distinct tag of its devotional.
        Readings without a resolvable devotional are ignored.

        Returns:
            dict mapping topic name to count; empty when nothing resolves
        """
        devotional_ids = [
            str(r["devotionalId"]) for r in readings if r.get("devotionalId")
        ]
        if not devotional_ids:
            return {}

        tags_by_id = await self._get_tags(set(devotional_ids))

        counts: Counter = Counter()
        for devotional_id in devotional_ids:
            for topic in tags_by_id.get(devotional_id, ()):
                counts[topic] += 1

        return dict(counts)

    async def _get_tags(self, devotional_ids: set) -> Dict[str, List[str]]:
        """Fetch normalized tags keyed by devotional id."""
        lookup: List[Any] = list(devotional_ids)
        for devotional_id in devotional_ids:
            try:
                lookup.append(ObjectId(devotional_id))
            except InvalidId:
                # slug ids are matched as plain strings
                continue

        cursor = self._devotionals_collection.find(
            {"_id": {"$in": lookup}},
            {"tags": 1}
        )
        docs = await cursor.to_list(length=None)
        logger.debug(f"Resolved {len(docs)} of {len(devotional_ids)} devotionals for topics")

        tags_by_id: Dict[str, List[str]] = {}
        for doc in docs:
            topics = []
            for tag in doc.get("tags") or []:
                topic = str(tag).strip().lower().title()
                if topic and topic not in topics:
                    topics.append(topic)
            tags_by_id[str(doc["_id"])] = topics

        return tags_by_id
