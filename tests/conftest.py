import os
import sys

# Put the repository root on sys.path so the habit_tracker package imports
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

import tempfile

# The app-level engine reads DATABASE_URL at import; point it at a scratch file.
# AI calls stay disabled so plan requests never leave the process.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(tempfile.mkdtemp(), "habit_tracker_test.db")
os.environ["GEMINI_API_KEY"] = ""

import uuid
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from habit_tracker.models.users import UserProfile  # noqa: F401
from habit_tracker.models.habit import Habit, HabitLog
from habit_tracker.models.sleep import SleepLog  # noqa: F401
from habit_tracker.models.timetable import TimetableEntry  # noqa: F401
from habit_tracker.services.store import HabitStore
from habit_tracker.services.tracker_session import TrackerSession

# A Monday, midday UTC
NOON = datetime(2025, 11, 10, 12, 0, tzinfo=timezone.utc)


class Clock:
    def __init__(self, now: datetime = NOON):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_habit(name="Read", daily=True, is_boolean=True, goal_value=1, unit="", user_id=None) -> Habit:
    return Habit(
        user_id=user_id or uuid.uuid4(),
        name=name,
        frequency="Daily" if daily else "Weekly",
        is_boolean=is_boolean,
        goal_value=goal_value,
        unit=unit,
    )


def make_log(habit: Habit, day: date, completed=True, value=0) -> HabitLog:
    return HabitLog(
        user_id=habit.user_id,
        habit_id=habit.id,
        log_date=day,
        completed=completed,
        value=value,
    )


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session_factory) -> HabitStore:
    return HabitStore(session_factory)


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def planner():
    planner = MagicMock()
    planner.generate_reminder = AsyncMock(return_value="You got this, go read!")
    planner.generate_daily_plan = AsyncMock(return_value="9:00 AM - 10:00 AM: Morning routine")
    return planner


@pytest_asyncio.fixture
async def tracker(store, planner, clock) -> TrackerSession:
    return await TrackerSession.start(store=store, planner=planner, clock=clock, tz_name="UTC")
