"""
Pydantic models for Devotional system request/response validation.

Field names are camelCase to match the mobile app's JSON.
"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class MarkAsReadRequest(BaseModel):
    """POST /api/mobile/devotional-stats"""
    devotionalId: Optional[str] = None
    date: Optional[str] = Field(None, description="YYYY-MM-DD or ISO timestamp; defaults to today")


class ToggleLikeRequest(BaseModel):
    """POST /api/mobile/devotional-likes"""
    devotionalId: str = Field(..., min_length=1)


class AddCommentRequest(BaseModel):
    """POST /api/mobile/devotional-comments"""
    devotionalId: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=2000)


# =============================================================================
# Response Schemas (used inside success_response data)
# =============================================================================

class WeeklyProgressEntry(BaseModel):
    date: str
    day: str
    completed: bool
    streak: int


class MonthlyProgressEntry(BaseModel):
    month: int
    monthName: str
    daysRead: int
    totalDays: int
    completionRate: float


class FavoriteTopic(BaseModel):
    topic: str
    count: int


class Achievement(BaseModel):
    id: str
    title: str
    description: str
    earned: bool
    earnedDate: Optional[str] = None
    icon: str


class EngagementStats(BaseModel):
    """Devotional engagement statistics for one member."""
    currentStreak: int
    longestStreak: int
    totalReadings: int
    thisMonthReadings: int
    thisMonthGoal: int
    completionRate: int
    averagePerWeek: float
    weeklyProgress: List[WeeklyProgressEntry]
    monthlyProgress: List[MonthlyProgressEntry]
    favoriteTopics: List[FavoriteTopic]
    achievements: List[Achievement]


class Reading(BaseModel):
    """Devotional reading in API responses."""
    id: str
    userId: str
    devotionalId: Optional[str] = None
    date: str
    createdAt: Optional[datetime] = None


class MarkAsReadData(BaseModel):
    reading: Reading
    stats: EngagementStats


class LikeToggleData(BaseModel):
    liked: bool
    likeCount: int


class LikeStatusData(BaseModel):
    likeCount: int
    isLiked: bool


class Comment(BaseModel):
    """Devotional comment with its author, as shown in the app."""
    id: str
    content: str
    devotionalId: str
    userId: str
    author: str
    avatar: Optional[str] = None
    timestamp: Optional[datetime] = None
    likes: int = 0
    isLiked: bool = False


class Pagination(BaseModel):
    page: int
    limit: int
    offset: int
    total: int
    totalPages: int
    hasNextPage: bool
    hasPreviousPage: bool


# =============================================================================
# Response envelopes
# =============================================================================

class EngagementStatsResponse(BaseModel):
    success: bool
    data: EngagementStats
    message: Optional[str] = None


class MarkAsReadResponse(BaseModel):
    success: bool
    data: MarkAsReadData
    message: Optional[str] = None


class ReadingHistoryResponse(BaseModel):
    success: bool
    data: List[Reading]
    pagination: Pagination


class LikeToggleResponse(BaseModel):
    success: bool
    data: LikeToggleData


class LikeStatusResponse(BaseModel):
    success: bool
    data: LikeStatusData


class CommentListResponse(BaseModel):
    success: bool
    data: List[Comment]


class CommentResponse(BaseModel):
    success: bool
    data: Comment
