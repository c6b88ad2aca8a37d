"""
FastAPI router for Devotional system endpoints.

Serves the mobile app: reading stats and streaks, marking devotionals
as read, reading history, likes and comments.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response, paginated_response
from sycamore.config import settings
from sycamore.dependencies import (
    require_auth,
    optional_auth,
    unlocks_enabled,
    get_engagement_tracker,
    get_reading_service,
    get_achievement_service,
    get_topic_service,
    get_like_service,
    get_member_service,
    get_comment_service,
)
from sycamore.devotional.engagement import DevotionalEngagementTracker
from sycamore.devotional.services.reading_service import ReadingService
from sycamore.devotional.services.achievement_service import AchievementService
from sycamore.devotional.services.topic_service import TopicService
from sycamore.devotional.services.like_service import LikeService
from sycamore.devotional.services.member_service import MemberService
from sycamore.devotional.services.comment_service import CommentService
from sycamore.devotional.models import (
    MarkAsReadRequest,
    ToggleLikeRequest,
    AddCommentRequest,
    EngagementStatsResponse,
    MarkAsReadResponse,
    ReadingHistoryResponse,
    LikeToggleResponse,
    LikeStatusResponse,
    CommentListResponse,
    CommentResponse,
)
from sycamore.pipelines import devotional as pipelines

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mobile", tags=["devotionals"])


@router.get("/devotional-stats", response_model=EngagementStatsResponse)
async def get_devotional_stats(
    user_id: Annotated[str, Depends(require_auth)],
    reading_service: Annotated[ReadingService, Depends(get_reading_service)],
    engagement_tracker: Annotated[DevotionalEngagementTracker, Depends(get_engagement_tracker)],
    achievement_service: Annotated[AchievementService, Depends(get_achievement_service)],
    topic_service: Annotated[TopicService, Depends(get_topic_service)],
):
    """Get devotional reading stats and streaks for the current member."""
    stats = await pipelines.get_stats_pipeline(
        reading_service=reading_service,
        engagement_tracker=engagement_tracker,
        achievement_service=achievement_service,
        topic_service=topic_service,
        user_id=user_id,
    )
    return success_response(stats)


@router.post("/devotional-stats", response_model=MarkAsReadResponse)
async def mark_devotional_read(
    body: MarkAsReadRequest,
    user_id: Annotated[str, Depends(require_auth)],
    reading_service: Annotated[ReadingService, Depends(get_reading_service)],
    engagement_tracker: Annotated[DevotionalEngagementTracker, Depends(get_engagement_tracker)],
    achievement_service: Annotated[AchievementService, Depends(get_achievement_service)],
    topic_service: Annotated[TopicService, Depends(get_topic_service)],
    record_unlocks: Annotated[bool, Depends(unlocks_enabled)],
):
    """
    Mark a devotional as read.

    Records at most one reading per day and returns the recomputed stats.
    """
    result = await pipelines.mark_as_read_pipeline(
        reading_service=reading_service,
        engagement_tracker=engagement_tracker,
        achievement_service=achievement_service,
        topic_service=topic_service,
        user_id=user_id,
        devotional_id=body.devotionalId,
        reading_date=body.date,
        record_unlocks=record_unlocks,
    )

    message = None if result["created"] else "Already marked as read for today"
    return success_response(
        {"reading": result["reading"], "stats": result["stats"]},
        message=message,
    )


@router.get("/devotional-readings", response_model=ReadingHistoryResponse)
async def get_reading_history(
    user_id: Annotated[str, Depends(require_auth)],
    reading_service: Annotated[ReadingService, Depends(get_reading_service)],
    limit: int = Query(30, ge=1, le=settings.READING_HISTORY_MAX_LIMIT),
    offset: int = Query(0, ge=0),
):
    """Get the current member's reading history, newest first."""
    result = await pipelines.get_history_pipeline(
        reading_service=reading_service,
        user_id=user_id,
        limit=limit,
        offset=offset,
    )

    return paginated_response(
        items=result["readings"],
        total=result["total"],
        limit=result["limit"],
        offset=result["offset"],
    )


@router.get("/members/{member_id}/devotional-stats", response_model=EngagementStatsResponse)
async def get_member_devotional_stats(
    member_id: str,
    _user_id: Annotated[str, Depends(require_auth)],
    member_service: Annotated[MemberService, Depends(get_member_service)],
    reading_service: Annotated[ReadingService, Depends(get_reading_service)],
    engagement_tracker: Annotated[DevotionalEngagementTracker, Depends(get_engagement_tracker)],
    achievement_service: Annotated[AchievementService, Depends(get_achievement_service)],
    topic_service: Annotated[TopicService, Depends(get_topic_service)],
):
    """Get devotional stats for a specific member."""
    stats = await pipelines.get_member_stats_pipeline(
        member_service=member_service,
        reading_service=reading_service,
        engagement_tracker=engagement_tracker,
        achievement_service=achievement_service,
        topic_service=topic_service,
        member_id=member_id,
    )
    return success_response(stats)


@router.post("/devotional-likes", response_model=LikeToggleResponse)
async def toggle_devotional_like(
    body: ToggleLikeRequest,
    user_id: Annotated[str, Depends(require_auth)],
    like_service: Annotated[LikeService, Depends(get_like_service)],
):
    """Like a devotional, or unlike it if already liked."""
    result = await pipelines.toggle_like_pipeline(
        like_service=like_service,
        user_id=user_id,
        devotional_id=body.devotionalId,
    )
    return success_response(result)


@router.get("/devotional-likes", response_model=LikeStatusResponse)
async def get_devotional_likes(
    like_service: Annotated[LikeService, Depends(get_like_service)],
    user_id: Annotated[Optional[str], Depends(optional_auth)],
    devotionalId: str = Query(..., min_length=1),
):
    """Get like count and whether the caller liked the devotional."""
    result = await pipelines.get_like_status_pipeline(
        like_service=like_service,
        devotional_id=devotionalId,
        user_id=user_id,
    )
    return success_response(result)


@router.get("/devotional-comments", response_model=CommentListResponse)
async def get_devotional_comments(
    comment_service: Annotated[CommentService, Depends(get_comment_service)],
    devotionalId: str = Query(..., min_length=1),
):
    """Get comments on a devotional, newest first."""
    comments = await pipelines.get_comments_pipeline(
        comment_service=comment_service,
        devotional_id=devotionalId,
    )
    return success_response(comments)


@router.post("/devotional-comments", response_model=CommentResponse)
async def add_devotional_comment(
    body: AddCommentRequest,
    user_id: Annotated[str, Depends(require_auth)],
    comment_service: Annotated[CommentService, Depends(get_comment_service)],
):
    """Post a comment on a devotional as the current member."""
    comment = await pipelines.add_comment_pipeline(
        comment_service=comment_service,
        user_id=user_id,
        devotional_id=body.devotionalId,
        content=body.content,
    )
    return success_response(comment)
