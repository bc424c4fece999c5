from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
import uuid

from .users import UserProfile
from .habit import Habit, HabitLog
from .sleep import SleepLog
from .timetable import TimetableEntry


@dataclass
class AppState:
    """
    In-memory snapshot of one user's data, rebuilt wholesale on every load.
    """
    profile: Optional[UserProfile] = None
    habits: List[Habit] = field(default_factory=list)
    habit_logs: List[HabitLog] = field(default_factory=list)
    sleep_logs: List[SleepLog] = field(default_factory=list)
    timetable: List[TimetableEntry] = field(default_factory=list)

    @property
    def daily_habits(self) -> List[Habit]:
        return [h for h in self.habits if h.is_daily]

    def find_habit(self, habit_id: uuid.UUID) -> Optional[Habit]:
        return next((h for h in self.habits if h.id == habit_id), None)

    def find_log(self, habit_id: uuid.UUID, log_date: date) -> Optional[HabitLog]:
        return next(
            (l for l in self.habit_logs if l.habit_id == habit_id and l.log_date == log_date),
            None,
        )

    def find_sleep_log(self, log_date: date) -> Optional[SleepLog]:
        return next((l for l in self.sleep_logs if l.log_date == log_date), None)
