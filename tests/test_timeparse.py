import pytest

from habit_tracker.utils.timeparse import calculate_sleep_hours, parse_hhmm


@pytest.mark.parametrize(
    "bedtime, wake_time, hours",
    [
        ("23:00", "07:00", 8.0),
        ("07:00", "08:00", 1.0),
        ("22:30", "06:15", 7.8),
        ("00:00", "00:00", 0.0),
        ("23:57", "00:00", 0.1),
    ],
)
def test_sleep_hours(bedtime, wake_time, hours):
    assert calculate_sleep_hours(bedtime, wake_time) == hours


def test_sleep_hours_rejects_bad_clock_values():
    with pytest.raises(ValueError):
        calculate_sleep_hours("25:00", "07:00")
    with pytest.raises(ValueError):
        calculate_sleep_hours("11pm", "07:00")


def test_parse_hhmm():
    assert parse_hhmm("7:05").minute == 5
    assert parse_hhmm("12:60") is None
    assert parse_hhmm("") is None
