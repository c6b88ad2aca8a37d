"""
FastAPI dependencies for Devotional system.

Provides dependency injection for devotional-related services.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from sycamore.devotional.engagement import DevotionalEngagementTracker
from sycamore.devotional.services.reading_service import ReadingService
from sycamore.devotional.services.achievement_service import AchievementService
from sycamore.devotional.services.topic_service import TopicService
from sycamore.devotional.services.like_service import LikeService
from sycamore.devotional.services.member_service import MemberService
from sycamore.devotional.services.comment_service import CommentService


_engagement_tracker: Optional[DevotionalEngagementTracker] = None
_reading_service: Optional[ReadingService] = None
_achievement_service: Optional[AchievementService] = None
_topic_service: Optional[TopicService] = None
_like_service: Optional[LikeService] = None
_member_service: Optional[MemberService] = None
_comment_service: Optional[CommentService] = None


def init_devotional_services(
    db: AsyncIOMotorDatabase,
    reading_history_max_limit: int = ReadingService.DEFAULT_MAX_LIMIT,
) -> None:
    """
    Initialize devotional services with database connection.

    Called once at application startup.

    Args:
        db: MongoDB database connection
        reading_history_max_limit: Page size cap for reading history
    """
    global _engagement_tracker, _reading_service, _achievement_service
    global _topic_service, _like_service, _member_service, _comment_service

    _engagement_tracker = DevotionalEngagementTracker()
    _reading_service = ReadingService(db=db, max_limit=reading_history_max_limit)
    _achievement_service = AchievementService(db=db)
    _topic_service = TopicService(db=db)
    _like_service = LikeService(db=db)
    _member_service = MemberService(db=db)
    _comment_service = CommentService(db=db)


async def ensure_devotional_indexes() -> None:
    """Create the unique indexes for readings, unlocks and likes, and the comment listing index."""
    await get_reading_service().ensure_indexes()
    await get_achievement_service().ensure_indexes()
    await get_like_service().ensure_indexes()
    await get_comment_service().ensure_indexes()


def get_engagement_tracker() -> DevotionalEngagementTracker:
    """Get engagement tracker instance."""
    if _engagement_tracker is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _engagement_tracker


def get_reading_service() -> ReadingService:
    """Get reading service instance."""
    if _reading_service is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _reading_service


def get_achievement_service() -> AchievementService:
    """Get achievement service instance."""
    if _achievement_service is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _achievement_service


def get_topic_service() -> TopicService:
    """Get topic service instance."""
    if _topic_service is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _topic_service


def get_like_service() -> LikeService:
    """Get like service instance."""
    if _like_service is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _like_service


def get_member_service() -> MemberService:
    """Get member service instance."""
    if _member_service is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _member_service


def get_comment_service() -> CommentService:
    """Get comment service instance."""
    if _comment_service is None:
        raise RuntimeError("Devotional services not initialized. Call init_devotional_services first.")
    return _comment_service
