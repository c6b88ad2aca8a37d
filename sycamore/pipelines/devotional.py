"""
Devotional system pipeline functions.

Stateless orchestration logic for devotional reading operations.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional, Dict, Any, List

from bson import ObjectId
from pymongo.errors import PyMongoError

from common.utils.exceptions import BadRequestException, NotFoundException
from sycamore.devotional.engagement import (
    DevotionalEngagementTracker,
    achievement_unlock_dates,
    collect_reading_days,
)
from sycamore.devotional.services.reading_service import ReadingService
from sycamore.devotional.services.achievement_service import AchievementService
from sycamore.devotional.services.topic_service import TopicService
from sycamore.devotional.services.like_service import LikeService
from sycamore.devotional.services.member_service import MemberService
from sycamore.devotional.services.comment_service import CommentService

logger = logging.getLogger(__name__)


async def get_stats_pipeline(
    reading_service: ReadingService,
    engagement_tracker: DevotionalEngagementTracker,
    achievement_service: AchievementService,
    topic_service: TopicService,
    user_id: str,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Compute devotional engagement stats for a user.

    Args:
        reading_service: For reading history
        engagement_tracker: For the stats computation
        achievement_service: For persisted unlock timestamps
        topic_service: For topic counts
        user_id: User whose stats to compute
        today: Current calendar day (defaults to today in UTC)
        now: Current time (defaults to now in UTC)

    Returns:
        Engagement stats dict
    """
    _require_object_id(user_id, "user ID")

    readings = await reading_service.get_readings(user_id)
    unlocks = await achievement_service.get_unlocks(user_id)
    topic_counts = await topic_service.get_topic_counts(readings)

    return engagement_tracker.compute(
        readings,
        today=today,
        now=now,
        unlocks=unlocks,
        topic_counts=topic_counts,
    )


async def mark_as_read_pipeline(
    reading_service: ReadingService,
    engagement_tracker: DevotionalEngagementTracker,
    achievement_service: AchievementService,
    topic_service: TopicService,
    user_id: str,
    devotional_id: Optional[str] = None,
    reading_date: Optional[str] = None,
    record_unlocks: bool = True,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Orchestrates the "mark devotional as read" flow.

    A day that is already recorded is not counted twice: the existing
    reading is returned together with the current stats.

    Args:
        reading_service: For data persistence
        engagement_tracker: For recomputing stats
        achievement_service: For persisting newly earned badges
        topic_service: For topic counts
        user_id: Current user's ID
        devotional_id: Optional devotional that was read
        reading_date: Optional day (YYYY-MM-DD or ISO timestamp)
        record_unlocks: Persist badges earned by this reading
        now: Current time (defaults to now in UTC)

    Returns:
        dict with reading, stats and created
    """
    _require_object_id(user_id, "user ID")
    now = now or datetime.now(timezone.utc)

    reading, created = await reading_service.mark_as_read(
        user_id,
        devotional_id=devotional_id,
        date=reading_date,
        now=now,
    )

    readings = await reading_service.get_readings(user_id)
    unlocks = await achievement_service.get_unlocks(user_id)
    topic_counts = await topic_service.get_topic_counts(readings)

    stats = engagement_tracker.compute(
        readings, now=now, unlocks=unlocks, topic_counts=topic_counts
    )

    if created and record_unlocks:
        try:
            merged = await achievement_service.record_unlocks(
                user_id,
                stats,
                unlocked_at=now,
                known=unlocks,
                unlock_days=achievement_unlock_dates(collect_reading_days(readings)),
            )
        except PyMongoError as e:
            # Don't fail the reading if unlock persistence fails
            logger.warning(f"Failed to persist achievement unlocks for user {user_id}: {e}")
        else:
            if merged != unlocks:
                stats = engagement_tracker.compute(
                    readings, now=now, unlocks=merged, topic_counts=topic_counts
                )

    return {
        "reading": _format_reading(reading),
        "stats": stats,
        "created": created,
    }


async def get_member_stats_pipeline(
    member_service: MemberService,
    reading_service: ReadingService,
    engagement_tracker: DevotionalEngagementTracker,
    achievement_service: AchievementService,
    topic_service: TopicService,
    member_id: str,
) -> Dict[str, Any]:
    """
    Compute devotional stats for a member viewed from the app.

    Raises:
        BadRequestException: Malformed member id
        NotFoundException: Member doesn't exist
    """
    _require_object_id(member_id, "member ID")

    member = await member_service.get_member(member_id)
    if not member:
        raise NotFoundException(message="Member not found", code="MEMBER_NOT_FOUND")

    return await get_stats_pipeline(
        reading_service=reading_service,
        engagement_tracker=engagement_tracker,
        achievement_service=achievement_service,
        topic_service=topic_service,
        user_id=member_id,
    )


async def get_history_pipeline(
    reading_service: ReadingService,
    user_id: str,
    limit: int = 30,
    offset: int = 0,
) -> Dict[str, Any]:
    """
    Get reading history with pagination.

    The page size is capped by the reading service, and the capped
    value is the limit reported back.

    Returns:
        dict with readings list and pagination metadata
    """
    _require_object_id(user_id, "user ID")
    limit = min(limit, reading_service.max_limit)

    readings = await reading_service.get_history(user_id, limit=limit, offset=offset)
    total = await reading_service.count_readings(user_id)

    return {
        "readings": [_format_reading(r) for r in readings],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


async def toggle_like_pipeline(
    like_service: LikeService,
    user_id: str,
    devotional_id: str,
) -> Dict[str, Any]:
    """Like or unlike a devotional for the current user."""
    _require_object_id(user_id, "user ID")
    return await like_service.toggle_like(devotional_id, user_id)


async def get_like_status_pipeline(
    like_service: LikeService,
    devotional_id: str,
    user_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Like count for a devotional, plus the caller's like state when known."""
    if user_id and not ObjectId.is_valid(user_id):
        user_id = None
    return await like_service.get_like_status(devotional_id, user_id)


async def get_comments_pipeline(
    comment_service: CommentService,
    devotional_id: str,
) -> List[Dict[str, Any]]:
    """Comments on a devotional, newest first."""
    return await comment_service.get_comments(devotional_id)


async def add_comment_pipeline(
    comment_service: CommentService,
    user_id: str,
    devotional_id: str,
    content: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Post a comment on a devotional as the current user.

    Surrounding whitespace is stripped; a comment with nothing left
    is rejected.

    Raises:
        BadRequestException: Malformed user id or empty content
    """
    _require_object_id(user_id, "user ID")

    content = content.strip()
    if not content:
        raise BadRequestException(message="Comment cannot be empty", code="EMPTY_COMMENT")

    return await comment_service.add_comment(devotional_id, user_id, content, now=now)

def _require_object_id(value: str, label: str) -> None:
    """Reject ids that can't be stored as ObjectIds."""
    if not ObjectId.is_valid(value):
        raise BadRequestException(message=f"Invalid {label}", code="INVALID_ID")


def _format_reading(reading: Dict[str, Any]) -> Dict[str, Any]:
    """Format reading document for API response."""
    devotional_id = reading.get("devotionalId")
    return {
        "id": str(reading["_id"]),
        "userId": str(reading["userId"]),
        "devotionalId": str(devotional_id) if devotional_id else None,
        "date": reading["date"],
        "createdAt": reading.get("createdAt"),
    }
