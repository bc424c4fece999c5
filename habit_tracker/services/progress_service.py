from __future__ import annotations
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Sequence
from ..models.habit import Habit, HabitLog
from ..models.sleep import SleepLog
from ..models.state import AppState
from .streak_service import completed_count_on
from ..utils.rounding import round_half_up, round_tenths

WINDOW_DAYS = 7


@dataclass(frozen=True)
class DayCompletion:
    date: date
    percentage: int


@dataclass(frozen=True)
class ProgressSummary:
    days: List[DayCompletion]
    today_percentage: int
    weekly_average: int
    average_sleep_hours: float


def completion_percentage(habits: Sequence[Habit], logs: Sequence[HabitLog], day: date) -> int:
    daily_habits = [h for h in habits if h.is_daily]
    if not daily_habits:
        return 0
    done = completed_count_on(daily_habits, logs, day)
    return round_half_up(done / len(daily_habits) * 100)


def completion_series(habits: Sequence[Habit], logs: Sequence[HabitLog], today: date) -> List[DayCompletion]:
    """Completion percentage for each of the seven days ending today, oldest first."""
    return [
        DayCompletion(date=day, percentage=completion_percentage(habits, logs, day))
        for day in (today - timedelta(days=offset) for offset in range(WINDOW_DAYS - 1, -1, -1))
    ]


def average_sleep_hours(sleep_logs: Sequence[SleepLog]) -> float:
    if not sleep_logs:
        return 0.0
    total = sum(float(log.total_hours) for log in sleep_logs)
    return round_tenths(total / len(sleep_logs))


def summarize(state: AppState, today: date) -> ProgressSummary:
    days = completion_series(state.habits, state.habit_logs, today)
    weekly_average = round_half_up(sum(d.percentage for d in days) / len(days))
    return ProgressSummary(
        days=days,
        today_percentage=days[-1].percentage,
        weekly_average=weekly_average,
        average_sleep_hours=average_sleep_hours(state.sleep_logs),
    )
