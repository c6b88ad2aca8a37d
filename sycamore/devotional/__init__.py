"""
Devotional System

Tracks which devotionals members read each day and turns that history
into streaks, progress and achievement badges.
"""

from sycamore.devotional.engagement import DevotionalEngagementTracker
from sycamore.devotional.services.reading_service import ReadingService
from sycamore.devotional.services.achievement_service import AchievementService
from sycamore.devotional.services.topic_service import TopicService
from sycamore.devotional.services.like_service import LikeService
from sycamore.devotional.services.member_service import MemberService
from sycamore.devotional.services.comment_service import CommentService

__all__ = [
    "DevotionalEngagementTracker",
    "ReadingService",
    "AchievementService",
    "TopicService",
    "LikeService",
    "MemberService",
    "CommentService",
]
