"""
Request and response bodies for the HTTP API.

Requests are validated here before they reach the tracker session; responses
mirror the rows of the users, habits, habit_logs, sleep_logs and
timetable_entries tables.
"""

from datetime import date, datetime
from typing import Annotated, List, Literal, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field

from .services.notifications import NotificationLevel

Frequency = Literal["Daily", "Weekly"]
Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
HHMM = Annotated[str, Field(pattern=r"^\d{1,2}:\d{2}$", description="Local clock time, HH:MM")]


class Row(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class ProfileOut(Row):
    id: uuid.UUID
    xp: int
    level: int
    current_streak: int
    max_streak: int
    dark_mode: bool


class SessionOut(BaseModel):
    user_id: uuid.UUID
    profile: Optional[ProfileOut]


class HabitIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    frequency: Frequency = "Daily"
    is_boolean: bool = True
    goal_value: int = Field(1, ge=1)
    unit: str = Field("", max_length=50)


class HabitPatch(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    frequency: Optional[Frequency] = None
    is_boolean: Optional[bool] = None
    goal_value: Optional[int] = Field(None, ge=1)
    unit: Optional[str] = Field(None, max_length=50)


class HabitOut(Row):
    id: uuid.UUID
    name: str
    frequency: str
    is_boolean: bool
    goal_value: int
    unit: str


class HabitLogIn(BaseModel):
    value: Optional[int] = Field(None, ge=0, description="Quantity habits only")


class HabitLogOut(Row):
    id: uuid.UUID
    habit_id: uuid.UUID
    log_date: date
    completed: bool
    value: int


class HabitStatus(BaseModel):
    habit: HabitOut
    log: Optional[HabitLogOut]
    complete: bool


class SleepIn(BaseModel):
    bedtime: HHMM
    wake_time: HHMM
    quality: int = Field(..., ge=1, le=5)


class SleepOut(Row):
    id: uuid.UUID
    log_date: date
    bedtime: str
    wake_time: str
    quality: int
    total_hours: float


class TimetableIn(BaseModel):
    course: str = Field(..., min_length=1, max_length=200)
    day: Weekday
    start_time: HHMM
    end_time: HHMM


class TimetableOut(Row):
    id: uuid.UUID
    course: str
    day: str
    start_time: str
    end_time: str


class CarouselOut(Row):
    kind: str
    text: str
    emoji: Optional[str] = None


class DashboardOut(BaseModel):
    profile: Optional[ProfileOut]
    today_progress: int
    habits: List[HabitStatus]
    carousel: CarouselOut


class DayCompletionOut(Row):
    date: date
    percentage: int


class ProgressOut(Row):
    days: List[DayCompletionOut]
    today_percentage: int
    weekly_average: int
    average_sleep_hours: float


class PlanOut(BaseModel):
    plan: str


class NotificationOut(Row):
    id: int
    message: str
    level: NotificationLevel
    icon: Optional[str]
    created_at: datetime
