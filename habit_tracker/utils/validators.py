from __future__ import annotations
from typing import Optional
from .dates import WEEKDAYS
from .timeparse import parse_hhmm
from ..models.habit import Frequency

def clamp_quality(quality: int) -> Optional[int]:
    try:
        q = int(quality)
        if 1 <= q <= 5:
            return q
        return None
    except (TypeError, ValueError):
        return None

def require_hhmm(value: str, field: str) -> str:
    if parse_hhmm(value) is None:
        raise ValueError(f"{field} must be in HH:MM format")
    return value.strip()

def require_weekday(day: str) -> str:
    if day not in WEEKDAYS:
        raise ValueError(f"day must be one of {', '.join(WEEKDAYS)}")
    return day

def require_frequency(frequency: str) -> str:
    try:
        return Frequency(frequency).value
    except ValueError:
        raise ValueError("frequency must be Daily or Weekly")

def validate_habit_fields(name: str, frequency: str, is_boolean: bool, goal_value: int) -> None:
    if not name or not name.strip():
        raise ValueError("Habit name is required")
    require_frequency(frequency)
    if not is_boolean and goal_value < 1:
        raise ValueError("goal_value must be at least 1 for quantity habits")
