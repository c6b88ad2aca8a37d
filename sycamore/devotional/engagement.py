"""
Devotional engagement tracker.

Turns a member's devotional reading history into the engagement stats
shown in the mobile app: streaks, weekly and monthly progress, topics
and achievement badges.

Pure computation - no I/O. The current date and time are passed in so
results are deterministic; they default to the current UTC clock.
"""

import calendar
import logging
import math
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

THIS_MONTH_GOAL = 30
WEEKS_PER_YEAR = 52
WEEKLY_WINDOW_DAYS = 7

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Shown until devotionals carry real tags.
PLACEHOLDER_TOPICS = (
    ("Faith", 0.25),
    ("Hope", 0.16),
    ("Love", 0.15),
    ("Peace", 0.09),
    ("Prayer", 0.06),
)
MAX_FAVORITE_TOPICS = 5

ACHIEVEMENTS: List[Dict[str, Any]] = [
    {
        "id": "first_week",
        "title": "First Week",
        "description": "Read devotionals for 7 days in a row",
        "icon": "📖",
        "metric": "longestStreak",
        "threshold": 7,
    },
    {
        "id": "two_weeks",
        "title": "Faithful Reader",
        "description": "Read devotionals for 14 days in a row",
        "icon": "🔥",
        "metric": "longestStreak",
        "threshold": 14,
    },
    {
        "id": "one_month",
        "title": "Devoted",
        "description": "Read devotionals for 30 days in a row",
        "icon": "👑",
        "metric": "longestStreak",
        "threshold": 30,
    },
    {
        "id": "hundred_readings",
        "title": "Century Reader",
        "description": "Complete 100 devotional readings",
        "icon": "💯",
        "metric": "totalReadings",
        "threshold": 100,
    },
]


def parse_reading_date(value: Any) -> Optional[date]:
    """
    Parse a YYYY-MM-DD calendar day.

    Returns:
        The date, or None when the value is not a valid calendar day string
    """
    if not isinstance(value, str) or not _DATE_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2025-06-03T08:00:00.000Z"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _reading_date(reading: Any) -> Any:
    if isinstance(reading, Mapping):
        return reading.get("date")
    return getattr(reading, "date", None)


def collect_reading_days(readings: Iterable[Any]) -> Set[date]:
    """
    Collect the distinct calendar days covered by a list of readings.

    Readings may be mappings or objects exposing ``date``. Duplicate days
    collapse into one; malformed dates are skipped with a warning.
    """
    days: Set[date] = set()
    for reading in readings:
        raw = _reading_date(reading)
        day = parse_reading_date(raw)
        if day is None:
            logger.warning(f"Skipping devotional reading with malformed date: {raw!r}")
            continue
        days.add(day)
    return days


def current_streak(days: Set[date], today: date) -> int:
    """
    Count consecutive reading days backward from today.

    Today is still open: a missing reading today does not break the
    streak, counting simply continues from yesterday.
    """
    streak = 0
    cursor = today

    while True:
        if cursor in days:
            streak += 1
            cursor -= timedelta(days=1)
        elif cursor == today:
            cursor -= timedelta(days=1)
        else:
            break

    return streak


def longest_streak(days: Iterable[date]) -> int:
    """Longest run of consecutive reading days over the whole history."""
    longest = 0
    running = 0
    previous: Optional[date] = None

    for day in sorted(set(days)):
        if previous is not None and day - previous == timedelta(days=1):
            running += 1
        else:
            running = 1
        longest = max(longest, running)
        previous = day

    return longest


def achievement_unlock_dates(days: Iterable[date]) -> Dict[str, date]:
    """
    Find the first calendar day on which each achievement was earned.

    Replays the history in order, so the result reflects when a
    threshold was actually crossed rather than when it was computed.

    Returns:
        dict mapping achievement id to the day it unlocked; achievements
        not yet earned are absent
    """
    unlocked: Dict[str, date] = {}
    running = 0
    longest = 0
    previous: Optional[date] = None

    for total, day in enumerate(sorted(set(days)), start=1):
        if previous is not None and day - previous == timedelta(days=1):
            running += 1
        else:
            running = 1
        longest = max(longest, running)
        previous = day

        values = {"longestStreak": longest, "totalReadings": total}
        for achievement in ACHIEVEMENTS:
            if achievement["id"] in unlocked:
                continue
            if values[achievement["metric"]] >= achievement["threshold"]:
                unlocked[achievement["id"]] = day

    return unlocked


def unlock_timestamp(day: date, now: datetime) -> datetime:
    """
    Timestamp to persist for a badge that unlocked on ``day``.

    ``now`` when the threshold was crossed today, otherwise midnight UTC
    of that day, so backdated readings and the backfill job agree.
    """
    if day == now.astimezone(timezone.utc).date():
        return now
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class DevotionalEngagementTracker:
    """
    Computes engagement stats from a member's devotional readings.

    Stateless; one instance can serve every request.
    """

    def compute(
        self,
        readings: Iterable[Any],
        today: Optional[date] = None,
        now: Optional[datetime] = None,
        unlocks: Optional[Mapping[str, datetime]] = None,
        topic_counts: Optional[Mapping[str, int]] = None,
    ) -> Dict[str, Any]:
        """
        Compute engagement stats.

        Args:
            readings: Reading records exposing a YYYY-MM-DD ``date``
            today: Current calendar day (defaults to today in UTC)
            now: Timestamp for badges earned without a persisted unlock
            unlocks: Persisted unlock timestamps keyed by achievement id
            topic_counts: Real topic counts; placeholder topics when empty

        Returns:
            dict with currentStreak, longestStreak, totalReadings,
            thisMonthReadings, thisMonthGoal, completionRate, averagePerWeek,
            weeklyProgress, monthlyProgress, favoriteTopics, achievements
        """
        now = now or datetime.now(timezone.utc)
        today = today or now.astimezone(timezone.utc).date()

        days = collect_reading_days(readings)
        total = len(days)

        streak = current_streak(days, today)
        longest = longest_streak(days)

        this_month = sum(
            1 for d in days if d.year == today.year and d.month == today.month
        )

        return {
            "currentStreak": streak,
            "longestStreak": longest,
            "totalReadings": total,
            "thisMonthReadings": this_month,
            "thisMonthGoal": THIS_MONTH_GOAL,
            "completionRate": int(_round_half_up(this_month / THIS_MONTH_GOAL * 100)),
            "averagePerWeek": _round_half_up(total / WEEKS_PER_YEAR, 1),
            "weeklyProgress": self._weekly_progress(days, today, streak),
            "monthlyProgress": self._monthly_progress(days, today),
            "favoriteTopics": self._favorite_topics(total, topic_counts),
            "achievements": self._achievements(longest, total, now, unlocks or {}),
        }

    def _weekly_progress(
        self,
        days: Set[date],
        today: date,
        streak: int,
    ) -> List[Dict[str, Any]]:
        """Last seven days, oldest first."""
        progress = []
        for offset in range(WEEKLY_WINDOW_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            completed = day in days
            progress.append({
                "date": day.strftime(DATE_FORMAT),
                "day": DAY_NAMES[day.weekday()],
                "completed": completed,
                "streak": streak if completed else 0,
            })
        return progress

    def _monthly_progress(self, days: Set[date], today: date) -> List[Dict[str, Any]]:
        """
        One entry per month of the current year.

        Past months are measured against their full length, the current
        month against the days elapsed so far, future months not at all.
        """
        progress = []
        for month in range(1, 13):
            days_read = sum(1 for d in days if d.year == today.year and d.month == month)

            if month < today.month:
                total_days = calendar.monthrange(today.year, month)[1]
            elif month == today.month:
                total_days = today.day
            else:
                total_days = 0

            progress.append({
                "month": month,
                "monthName": MONTH_NAMES[month - 1],
                "daysRead": days_read,
                "totalDays": total_days,
                "completionRate": days_read / total_days if total_days > 0 else 0,
            })
        return progress

    def _favorite_topics(
        self,
        total: int,
        topic_counts: Optional[Mapping[str, int]],
    ) -> List[Dict[str, Any]]:
        if topic_counts:
            ranked = sorted(topic_counts.items(), key=lambda item: (-item[1], item[0]))
            return [
                {"topic": topic, "count": count}
                for topic, count in ranked[:MAX_FAVORITE_TOPICS]
            ]

        return [
            {"topic": topic, "count": math.floor(total * share)}
            for topic, share in PLACEHOLDER_TOPICS
        ]

    def _achievements(
        self,
        longest: int,
        total: int,
        now: datetime,
        unlocks: Mapping[str, datetime],
    ) -> List[Dict[str, Any]]:
        values = {"longestStreak": longest, "totalReadings": total}
        achievements = []

        for definition in ACHIEVEMENTS:
            earned = values[definition["metric"]] >= definition["threshold"]
            earned_date = None
            if earned:
                earned_date = format_timestamp(unlocks.get(definition["id"], now))

            achievements.append({
                "id": definition["id"],
                "title": definition["title"],
                "description": definition["description"],
                "earned": earned,
                "earnedDate": earned_date,
                "icon": definition["icon"],
            })

        return achievements
