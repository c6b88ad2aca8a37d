"""Unit tests for the devotional engagement tracker."""

import random
import pytest
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from sycamore.devotional.engagement import (
    DevotionalEngagementTracker,
    achievement_unlock_dates,
    current_streak,
    longest_streak,
)

from conftest import TODAY, NOW, days_back


def _readings(days):
    return [{"date": d.strftime("%Y-%m-%d") if isinstance(d, date) else d} for d in days]


@pytest.fixture
def tracker():
    return DevotionalEngagementTracker()


def _compute(tracker, days, **kwargs):
    kwargs.setdefault("today", TODAY)
    kwargs.setdefault("now", NOW)
    return tracker.compute(_readings(days), **kwargs)


def _achievement(stats, achievement_id):
    return next(a for a in stats["achievements"] if a["id"] == achievement_id)


# ─────────────────────────────────────────────────────────────────
# Empty history
# ─────────────────────────────────────────────────────────────────


class TestEmptyHistory:
    def test_all_counters_zero(self, tracker):
        stats = _compute(tracker, [])

        assert stats["currentStreak"] == 0
        assert stats["longestStreak"] == 0
        assert stats["totalReadings"] == 0
        assert stats["thisMonthReadings"] == 0
        assert stats["thisMonthGoal"] == 30
        assert stats["completionRate"] == 0
        assert stats["averagePerWeek"] == 0

    def test_no_achievements_earned(self, tracker):
        stats = _compute(tracker, [])

        assert [a["id"] for a in stats["achievements"]] == [
            "first_week", "two_weeks", "one_month", "hundred_readings",
        ]
        assert all(not a["earned"] for a in stats["achievements"])
        assert all(a["earnedDate"] is None for a in stats["achievements"])

    def test_week_has_seven_absent_days(self, tracker):
        stats = _compute(tracker, [])

        assert len(stats["weeklyProgress"]) == 7
        assert all(not d["completed"] for d in stats["weeklyProgress"])
        assert all(d["streak"] == 0 for d in stats["weeklyProgress"])

    def test_year_has_twelve_months(self, tracker):
        stats = _compute(tracker, [])

        assert len(stats["monthlyProgress"]) == 12
        assert all(m["daysRead"] == 0 for m in stats["monthlyProgress"])


# ─────────────────────────────────────────────────────────────────
# Current streak
# ─────────────────────────────────────────────────────────────────


class TestCurrentStreak:
    @pytest.mark.parametrize("count", [1, 5, 40])
    def test_unbroken_run_ending_today(self, tracker, count):
        stats = _compute(tracker, days_back(count))

        assert stats["currentStreak"] == count

    def test_today_and_yesterday(self, tracker):
        stats = _compute(tracker, days_back(2))

        assert stats["currentStreak"] == 2

    def test_yesterday_only_keeps_streak_open(self, tracker):
        stats = _compute(tracker, [TODAY - timedelta(days=1)])

        assert stats["currentStreak"] == 1

    def test_run_ending_yesterday_counts_in_full(self, tracker):
        stats = _compute(tracker, days_back(6, end=TODAY - timedelta(days=1)))

        assert stats["currentStreak"] == 6

    def test_gap_before_yesterday_breaks_streak(self, tracker):
        stats = _compute(tracker, [TODAY - timedelta(days=2)])

        assert stats["currentStreak"] == 0

    def test_gap_after_today(self):
        days = {date(2025, 6, 1), date(2025, 6, 3)}

        assert current_streak(days, date(2025, 6, 3)) == 1

    def test_future_readings_are_not_counted(self):
        days = {date(2025, 6, 4), date(2025, 6, 3)}

        assert current_streak(days, date(2025, 6, 3)) == 1

    def test_streak_crosses_year_boundary(self):
        days = {date(2024, 12, 30), date(2024, 12, 31)}

        assert current_streak(days, date(2025, 1, 1)) == 2


# ─────────────────────────────────────────────────────────────────
# Longest streak
# ─────────────────────────────────────────────────────────────────


class TestLongestStreak:
    def test_empty(self):
        assert longest_streak([]) == 0

    def test_picks_longest_run(self):
        days = (
            days_back(3, end=date(2025, 1, 10))
            + days_back(5, end=date(2025, 3, 1))
            + [date(2025, 5, 5)]
        )

        assert longest_streak(days) == 5

    def test_run_across_month_end(self):
        days = [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

        assert longest_streak(days) == 3

    def test_invariant_under_reordering_and_duplicates(self, tracker):
        days = days_back(4, end=date(2025, 2, 10)) + days_back(9, end=date(2025, 4, 20))
        shuffled = days + days[:5]
        random.Random(7).shuffle(shuffled)

        assert _compute(tracker, days)["longestStreak"] == 9
        assert _compute(tracker, shuffled)["longestStreak"] == 9


# ─────────────────────────────────────────────────────────────────
# Concrete scenarios
# ─────────────────────────────────────────────────────────────────


class TestScenarios:
    def test_three_consecutive_days_ending_today(self, tracker):
        stats = _compute(tracker, ["2025-06-01", "2025-06-02", "2025-06-03"])

        assert stats["currentStreak"] == 3
        assert stats["longestStreak"] == 3
        assert stats["totalReadings"] == 3

    def test_gap_yesterday(self, tracker):
        stats = _compute(tracker, ["2025-06-01", "2025-06-03"])

        assert stats["longestStreak"] == 1
        assert stats["currentStreak"] == 1

    def test_duplicate_days_count_once(self, tracker):
        stats = _compute(tracker, ["2025-06-03", "2025-06-03", "2025-06-02"])

        assert stats["totalReadings"] == 2
        assert stats["thisMonthReadings"] == 2

    def test_accepts_objects_with_date_attribute(self, tracker):
        readings = [SimpleNamespace(date="2025-06-02"), SimpleNamespace(date="2025-06-03")]

        stats = tracker.compute(readings, today=TODAY, now=NOW)

        assert stats["currentStreak"] == 2

    def test_malformed_dates_are_skipped(self, tracker):
        stats = _compute(tracker, ["2025-06-03", "June 2nd", "2025-13-01", None, "2025-6-1"])

        assert stats["totalReadings"] == 1
        assert stats["currentStreak"] == 1


# ─────────────────────────────────────────────────────────────────
# Monthly and weekly progress
# ─────────────────────────────────────────────────────────────────


class TestProgress:
    def test_this_month_and_completion_rate(self, tracker):
        stats = _compute(tracker, ["2025-06-01", "2025-06-02", "2025-06-03", "2025-05-31"])

        assert stats["thisMonthReadings"] == 3
        assert stats["completionRate"] == 10

    def test_completion_rate_may_exceed_goal(self, tracker):
        july_today = date(2025, 7, 31)
        stats = _compute(tracker, days_back(31, end=july_today), today=july_today)

        assert stats["thisMonthReadings"] == 31
        assert stats["completionRate"] == 103

    def test_average_per_week_rounds_to_one_decimal(self, tracker):
        stats = _compute(tracker, days_back(3))
        assert stats["averagePerWeek"] == 0.1

        stats = _compute(tracker, days_back(26))
        assert stats["averagePerWeek"] == 0.5

    def test_monthly_denominators(self, tracker):
        stats = _compute(tracker, ["2025-05-30", "2025-05-31", "2025-06-02"])
        months = {m["month"]: m for m in stats["monthlyProgress"]}

        assert months[2]["totalDays"] == 28
        assert months[5]["monthName"] == "May"
        assert months[5]["totalDays"] == 31
        assert months[5]["daysRead"] == 2
        assert months[5]["completionRate"] == pytest.approx(2 / 31)
        assert months[6]["totalDays"] == 3
        assert months[6]["daysRead"] == 1
        assert months[6]["completionRate"] == pytest.approx(1 / 3)

    def test_future_months_are_empty(self, tracker):
        stats = _compute(tracker, days_back(10))

        for month in stats["monthlyProgress"][6:]:
            assert month["totalDays"] == 0
            assert month["completionRate"] == 0

    def test_previous_year_not_in_monthly_progress(self, tracker):
        stats = _compute(tracker, ["2024-06-01", "2024-06-02"])

        assert all(m["daysRead"] == 0 for m in stats["monthlyProgress"])
        assert stats["thisMonthReadings"] == 0
        assert stats["totalReadings"] == 2

    def test_weekly_progress_oldest_first(self, tracker):
        stats = _compute(tracker, ["2025-06-02", "2025-06-03", "2025-05-29"])
        week = stats["weeklyProgress"]

        assert [d["date"] for d in week] == [
            "2025-05-28", "2025-05-29", "2025-05-30", "2025-05-31",
            "2025-06-01", "2025-06-02", "2025-06-03",
        ]
        assert week[-1]["day"] == "Tue"
        assert [d["completed"] for d in week] == [False, True, False, False, False, True, True]
        assert [d["streak"] for d in week] == [0, 2, 0, 0, 0, 2, 2]


# ─────────────────────────────────────────────────────────────────
# Achievements and topics
# ─────────────────────────────────────────────────────────────────


class TestAchievements:
    def test_week_run_anywhere_in_history(self, tracker):
        stats = _compute(tracker, days_back(7, end=date(2024, 9, 15)))

        assert stats["longestStreak"] >= 7
        first_week = _achievement(stats, "first_week")
        assert first_week["earned"] is True
        assert first_week["earnedDate"] == "2025-06-03T09:00:00.000Z"
        assert _achievement(stats, "two_weeks")["earned"] is False

    def test_hundred_non_consecutive_readings(self, tracker):
        days = [TODAY - timedelta(days=2 * i) for i in range(100)]

        stats = _compute(tracker, days)

        assert stats["longestStreak"] == 1
        assert _achievement(stats, "hundred_readings")["earned"] is True
        assert _achievement(stats, "first_week")["earned"] is False

    def test_persisted_unlock_date_is_reported(self, tracker):
        unlocked_at = datetime(2025, 1, 7, tzinfo=timezone.utc)

        stats = _compute(
            tracker,
            days_back(14, end=date(2025, 1, 20)),
            unlocks={"first_week": unlocked_at},
        )

        assert _achievement(stats, "first_week")["earnedDate"] == "2025-01-07T00:00:00.000Z"
        assert _achievement(stats, "two_weeks")["earnedDate"] == "2025-06-03T09:00:00.000Z"

    def test_unlock_dates_follow_history(self):
        days = days_back(30, end=date(2025, 1, 30)) + [
            date(2025, 3, 1) + timedelta(days=2 * i) for i in range(70)
        ]

        unlocked = achievement_unlock_dates(days)

        assert unlocked["first_week"] == date(2025, 1, 7)
        assert unlocked["two_weeks"] == date(2025, 1, 14)
        assert unlocked["one_month"] == date(2025, 1, 30)
        assert unlocked["hundred_readings"] == date(2025, 3, 1) + timedelta(days=2 * 69)

    def test_unlock_dates_empty_history(self):
        assert achievement_unlock_dates([]) == {}


class TestFavoriteTopics:
    def test_placeholder_when_no_topic_data(self, tracker):
        stats = _compute(tracker, [TODAY - timedelta(days=i) for i in range(100)])

        assert stats["favoriteTopics"] == [
            {"topic": "Faith", "count": 25},
            {"topic": "Hope", "count": 16},
            {"topic": "Love", "count": 15},
            {"topic": "Peace", "count": 9},
            {"topic": "Prayer", "count": 6},
        ]

    def test_real_topics_ranked(self, tracker):
        counts = {"Grace": 2, "Prayer": 9, "Hope": 4, "Joy": 4, "Trust": 1, "Light": 3}

        stats = _compute(tracker, days_back(3), topic_counts=counts)

        assert stats["favoriteTopics"] == [
            {"topic": "Prayer", "count": 9},
            {"topic": "Hope", "count": 4},
            {"topic": "Joy", "count": 4},
            {"topic": "Light", "count": 3},
            {"topic": "Grace", "count": 2},
        ]
