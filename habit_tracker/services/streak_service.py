from __future__ import annotations
from typing import Dict, Iterable, List, Sequence
from datetime import date, timedelta
import uuid

from ..models.habit import Habit, HabitLog

MAX_STREAK_DAYS = 365


def completed_count_on(daily_habits: Sequence[Habit], logs: Iterable[HabitLog], day: date) -> int:
    """Number of daily habits whose log for `day` passes the habit's completion test."""
    by_id: Dict[uuid.UUID, Habit] = {h.id: h for h in daily_habits}
    count = 0
    for log in logs:
        if log.log_date != day:
            continue
        habit = by_id.get(log.habit_id)
        if habit is not None and habit.is_complete(log):
            count += 1
    return count


def compute_streak(habits: Sequence[Habit], logs: Sequence[HabitLog], today: date) -> int:
    """
    Consecutive days, counting back from `today`, on which every daily habit was completed.

    A missing log counts as incomplete. Weekly habits are ignored. Returns 0 when there
    are no daily habits; callers decide whether that means "skip".
    """
    daily_habits: List[Habit] = [h for h in habits if h.is_daily]
    if not daily_habits:
        return 0

    logs_by_day: Dict[date, List[HabitLog]] = {}
    for log in logs:
        logs_by_day.setdefault(log.log_date, []).append(log)

    streak = 0
    check_date = today
    while streak < MAX_STREAK_DAYS:
        done = completed_count_on(daily_habits, logs_by_day.get(check_date, ()), check_date)
        if done != len(daily_habits):
            break
        streak += 1
        check_date -= timedelta(days=1)
    return streak
