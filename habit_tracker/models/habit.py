from typing import Optional, Tuple, Union
from dataclasses import dataclass
from datetime import datetime, date, timezone
from enum import Enum
import uuid

from sqlmodel import SQLModel, Field, UniqueConstraint
from sqlalchemy import DateTime, Column


class Frequency(str, Enum):
    DAILY = "Daily"
    WEEKLY = "Weekly"


@dataclass(frozen=True)
class CheckOffGoal:
    """Done / not done. Logging again on the same day toggles the flag."""

    def is_complete(self, log: Optional["HabitLog"]) -> bool:
        return log is not None and bool(log.completed)

    def record(self, previous: Optional["HabitLog"], value: Optional[int]) -> Tuple[bool, int]:
        if previous is None:
            return True, 0
        return not previous.completed, previous.value


@dataclass(frozen=True)
class QuantityGoal:
    """Complete once the logged value reaches the target."""
    target: int

    def is_complete(self, log: Optional["HabitLog"]) -> bool:
        return log is not None and log.value >= self.target

    def record(self, previous: Optional["HabitLog"], value: Optional[int]) -> Tuple[bool, int]:
        new_value = value or 0
        return new_value >= self.target, new_value


HabitGoal = Union[CheckOffGoal, QuantityGoal]


class Habit(SQLModel, table=True):
    """
    A user habit: either a check-off habit or a quantity goal (goal_value + unit).
    """
    __tablename__ = "habits"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True, foreign_key="users.id", ondelete="CASCADE")

    name: str = Field(max_length=200)
    # Daily or Weekly; only daily habits take part in streaks
    frequency: str = Field(default=Frequency.DAILY.value, max_length=20)
    goal_value: int = Field(default=1)
    unit: str = Field(default="", max_length=50)
    is_boolean: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    @property
    def is_daily(self) -> bool:
        return self.frequency == Frequency.DAILY.value

    @property
    def goal(self) -> HabitGoal:
        if self.is_boolean:
            return CheckOffGoal()
        return QuantityGoal(target=self.goal_value)

    def is_complete(self, log: Optional["HabitLog"]) -> bool:
        return self.goal.is_complete(log)


class HabitLog(SQLModel, table=True):
    """
    One row per (user, habit, day).
    """
    __tablename__ = "habit_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "habit_id", "log_date", name="uq_habit_logs_user_habit_date"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True, foreign_key="users.id", ondelete="CASCADE")
    habit_id: uuid.UUID = Field(index=True, foreign_key="habits.id", ondelete="CASCADE")

    completed: bool = Field(default=False)
    value: int = Field(default=0)
    log_date: date = Field(index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
