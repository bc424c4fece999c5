from datetime import date, timedelta

from habit_tracker.models.sleep import SleepLog
from habit_tracker.models.state import AppState
from habit_tracker.services.progress_service import (
    average_sleep_hours,
    completion_series,
    summarize,
)
from habit_tracker.utils.rounding import round_half_up
from conftest import make_habit, make_log

TODAY = date(2025, 11, 10)


def _sleep(hours, days_ago=0):
    return SleepLog(
        user_id=None,
        bedtime="23:00",
        wake_time="07:00",
        quality=4,
        total_hours=hours,
        log_date=TODAY - timedelta(days=days_ago),
    )


def test_series_covers_seven_days_ending_today():
    days = completion_series([], [], TODAY)
    assert [d.date for d in days] == [TODAY - timedelta(days=i) for i in range(6, -1, -1)]


def test_zero_daily_habits_gives_zero_everywhere():
    gym = make_habit("Gym", daily=False)
    state = AppState(habits=[gym], habit_logs=[make_log(gym, TODAY)])

    summary = summarize(state, TODAY)

    assert [d.percentage for d in summary.days] == [0] * 7
    assert summary.today_percentage == 0
    assert summary.weekly_average == 0
    assert summary.average_sleep_hours == 0.0


def test_percentages_round_to_nearest_integer():
    habits = [make_habit(f"h{i}") for i in range(3)]
    logs = [make_log(habits[0], TODAY), make_log(habits[1], TODAY)]
    logs.append(make_log(habits[0], TODAY - timedelta(days=1)))

    days = completion_series(habits, logs, TODAY)

    assert days[-1].percentage == 67
    assert days[-2].percentage == 33


def test_summary_today_and_average():
    read = make_habit("Read")
    water = make_habit("Water", is_boolean=False, goal_value=8)
    logs = [
        make_log(read, TODAY),
        make_log(water, TODAY, value=8),
        make_log(read, TODAY - timedelta(days=1)),
        make_log(water, TODAY - timedelta(days=1), value=2),
    ]
    state = AppState(habits=[read, water], habit_logs=logs, sleep_logs=[_sleep(8.0), _sleep(6.5, 1)])

    summary = summarize(state, TODAY)

    assert summary.today_percentage == 100
    # (100 + 50) / 7 = 21.4
    assert summary.weekly_average == 21
    assert summary.average_sleep_hours == 7.3


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_average_sleep_empty():
    assert average_sleep_hours([]) == 0.0
