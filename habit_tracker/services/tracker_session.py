from __future__ import annotations
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
import asyncio
import functools
import random
import uuid

from loguru import logger

from ..config import settings
from ..models.habit import Habit, HabitLog
from ..models.sleep import SleepLog
from ..models.state import AppState
from ..models.timetable import TimetableEntry
from ..models.users import UserProfile
from ..scheduler.reminders import ReminderScheduler
from ..utils.dates import day_key, now_in_zone
from ..utils.timeparse import calculate_sleep_hours
from ..utils.validators import (
    clamp_quality,
    require_frequency,
    require_hhmm,
    require_weekday,
    validate_habit_fields,
)
from .gamification_service import (
    STREAK_ICON,
    STREAK_MILESTONE_DAYS,
    STREAK_MILESTONE_MESSAGE,
    XpAward,
    apply_award,
    habit_completed_message,
    sleep_logged_message,
)
from .motivation import INITIAL_CONTENT, CarouselContent, pick_content
from .notifications import Notifier
from .planner_service import PLAN_FAILED_TEXT, PlannerService
from .progress_service import ProgressSummary, completion_percentage, summarize
from .store import HabitStore, StoreError
from .streak_service import compute_streak

HABIT_FIELDS = ("name", "frequency", "is_boolean", "goal_value", "unit")


def serialized(method):
    """Run a session method while holding the session lock; mutations never interleave."""
    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        async with self._lock:
            return await method(self, *args, **kwargs)
    return wrapper


class TrackerSession:
    """
    One user's running session: the loaded snapshot plus every operation that
    mutates it. Writes go to the store first; the snapshot changes only after the
    store confirms. Failures are logged and surfaced through the notifier.
    """

    def __init__(
        self,
        user_id: uuid.UUID,
        store: Optional[HabitStore] = None,
        planner: Optional[PlannerService] = None,
        notifier: Optional[Notifier] = None,
        tz_name: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.user_id = user_id
        self.store = store or HabitStore()
        self.planner = planner or PlannerService()
        self.notifier = notifier or Notifier()
        self.tz_name = tz_name or settings.USER_TIMEZONE
        self._clock = clock or (lambda: now_in_zone(self.tz_name))
        self._rng = rng or random.Random()
        self._lock = asyncio.Lock()

        self.state = AppState()
        self.carousel: CarouselContent = INITIAL_CONTENT
        self.ai_plan = ""
        self.ai_plan_loading = False
        self.reminders = ReminderScheduler(
            self.planner, self.notifier, last_check=self.now(), tz_name=self.tz_name
        )

    @classmethod
    async def start(cls, user_id: Optional[uuid.UUID] = None, **kwargs: Any) -> "TrackerSession":
        """Resume `user_id`, or sign in a new anonymous user when none is given."""
        session = cls(user_id or uuid.uuid4(), **kwargs)
        await session.load()
        return session

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return day_key(self.now(), self.tz_name)

    @property
    def profile(self) -> Optional[UserProfile]:
        return self.state.profile

    # --- loading -------------------------------------------------------------

    @serialized
    async def load(self) -> bool:
        try:
            self.state = await self.store.load_state(self.user_id)
        except StoreError:
            logger.exception("Error loading data for user {}", self.user_id)
            self.notifier.error("Failed to load your data")
            return False
        logger.info(
            "Loaded {} habits, {} logs for user {}",
            len(self.state.habits), len(self.state.habit_logs), self.user_id,
        )
        await self._recalculate_streak()
        return True

    async def _update_profile(self, **values: Any) -> None:
        values["updated_at"] = datetime.now(timezone.utc)
        await self.store.update(UserProfile, self.user_id, **values)
        for key, value in values.items():
            setattr(self.state.profile, key, value)

    # --- gamification --------------------------------------------------------

    @serialized
    async def award_xp(self, amount: int, message: Optional[str] = None) -> Optional[XpAward]:
        return await self._award_xp(amount, message)

    async def _award_xp(self, amount: int, message: Optional[str] = None) -> Optional[XpAward]:
        profile = self.state.profile
        if profile is None:
            return None

        award = apply_award(profile.xp, profile.level, amount, message)
        try:
            await self._update_profile(xp=award.xp, level=award.level)
        except StoreError:
            logger.exception("Error awarding {} XP to user {}", amount, self.user_id)
            self.notifier.error("Failed to update XP")
            return None

        self.notifier.success(award.message, award.icon)
        return award

    @serialized
    async def recalculate_streak(self) -> int:
        return await self._recalculate_streak()

    async def _recalculate_streak(self) -> int:
        profile = self.state.profile
        if profile is None:
            return 0
        if not self.state.daily_habits:
            return profile.current_streak

        streak = compute_streak(self.state.habits, self.state.habit_logs, self.today())
        if streak == profile.current_streak:
            return streak

        max_streak = max(streak, profile.max_streak)
        try:
            await self._update_profile(current_streak=streak, max_streak=max_streak)
        except StoreError:
            logger.exception("Error saving streak for user {}", self.user_id)
            self.notifier.error("Failed to update streak")
            return profile.current_streak

        if streak == STREAK_MILESTONE_DAYS:
            self.notifier.success(STREAK_MILESTONE_MESSAGE, STREAK_ICON)
        return streak

    # --- habits --------------------------------------------------------------

    @serialized
    async def create_habit(
        self,
        name: str,
        frequency: str = "Daily",
        is_boolean: bool = True,
        goal_value: int = 1,
        unit: str = "",
    ) -> Optional[Habit]:
        try:
            validate_habit_fields(name, frequency, is_boolean, goal_value)
        except ValueError as e:
            self.notifier.error(str(e))
            return None

        habit = Habit(
            user_id=self.user_id,
            name=name.strip(),
            frequency=require_frequency(frequency),
            is_boolean=is_boolean,
            goal_value=goal_value,
            unit=unit,
        )
        try:
            await self.store.create(habit)
        except StoreError:
            logger.exception("Error creating habit for user {}", self.user_id)
            self.notifier.error("Failed to create habit")
            return None

        self.state.habits.append(habit)
        self.notifier.success("Habit created successfully!")
        await self._recalculate_streak()
        return habit

    @serialized
    async def update_habit(self, habit_id: uuid.UUID, **updates: Any) -> Optional[Habit]:
        habit = self.state.find_habit(habit_id)
        if habit is None:
            self.notifier.error("Habit not found")
            return None

        changes = {k: v for k, v in updates.items() if k in HABIT_FIELDS and v is not None}
        merged = {field: changes.get(field, getattr(habit, field)) for field in HABIT_FIELDS}
        try:
            validate_habit_fields(merged["name"], merged["frequency"], merged["is_boolean"], merged["goal_value"])
        except ValueError as e:
            self.notifier.error(str(e))
            return None
        if "frequency" in changes:
            changes["frequency"] = require_frequency(changes["frequency"])

        try:
            await self.store.update(Habit, habit_id, **changes)
        except StoreError:
            logger.exception("Error updating habit {}", habit_id)
            self.notifier.error("Failed to update habit")
            return None

        for key, value in changes.items():
            setattr(habit, key, value)
        self.notifier.success("Habit updated!")
        await self._recalculate_streak()
        return habit

    @serialized
    async def delete_habit(self, habit_id: uuid.UUID) -> bool:
        try:
            await self.store.delete(Habit, habit_id)
        except StoreError:
            logger.exception("Error deleting habit {}", habit_id)
            self.notifier.error("Failed to delete habit")
            return False

        # logs go with the habit (ON DELETE CASCADE)
        self.state.habits = [h for h in self.state.habits if h.id != habit_id]
        self.state.habit_logs = [l for l in self.state.habit_logs if l.habit_id != habit_id]
        self.notifier.success("Habit deleted")
        await self._recalculate_streak()
        return True

    @serialized
    async def log_habit(self, habit_id: uuid.UUID, value: Optional[int] = None) -> Optional[HabitLog]:
        """
        Record today's progress. Check-off habits toggle; quantity habits take `value`.
        XP is awarded only when the log goes from incomplete to complete.
        """
        habit = self.state.find_habit(habit_id)
        if habit is None:
            logger.warning("log_habit: habit {} not in snapshot for user {}", habit_id, self.user_id)
            return None

        today = self.today()
        existing = self.state.find_log(habit_id, today)
        was_complete = habit.is_complete(existing)
        completed, new_value = habit.goal.record(existing, value)

        try:
            if existing is not None:
                await self.store.update(HabitLog, existing.id, completed=completed, value=new_value)
                existing.completed = completed
                existing.value = new_value
                log = existing
            else:
                log = HabitLog(
                    user_id=self.user_id,
                    habit_id=habit_id,
                    completed=completed,
                    value=new_value,
                    log_date=today,
                )
                await self.store.create(log)
                self.state.habit_logs.insert(0, log)
        except StoreError:
            logger.exception("Error logging habit {}", habit_id)
            self.notifier.error("Failed to log habit")
            return None

        if habit.is_complete(log) and not was_complete:
            await self._award_xp(settings.HABIT_COMPLETION_XP, habit_completed_message(habit.name))
        await self._recalculate_streak()
        return log

    def today_habit_status(self) -> List[Tuple[Habit, Optional[HabitLog], bool]]:
        today = self.today()
        rows = []
        for habit in self.state.habits:
            log = self.state.find_log(habit.id, today)
            rows.append((habit, log, habit.is_complete(log)))
        return rows

    # --- sleep ---------------------------------------------------------------

    @serialized
    async def log_sleep(self, bedtime: str, wake_time: str, quality: int) -> Optional[SleepLog]:
        """Upsert today's sleep log; only the first log of the day earns XP."""
        try:
            bedtime = require_hhmm(bedtime, "bedtime")
            wake_time = require_hhmm(wake_time, "wake_time")
            checked_quality = clamp_quality(quality)
            if checked_quality is None:
                raise ValueError("quality must be between 1 and 5")
        except ValueError as e:
            self.notifier.error(str(e))
            return None

        total_hours = calculate_sleep_hours(bedtime, wake_time)
        today = self.today()
        existing = self.state.find_sleep_log(today)
        values: Dict[str, Any] = dict(
            bedtime=bedtime, wake_time=wake_time, quality=checked_quality, total_hours=total_hours
        )

        try:
            if existing is not None:
                await self.store.update(SleepLog, existing.id, **values)
                for key, value in values.items():
                    setattr(existing, key, value)
                log = existing
            else:
                log = SleepLog(user_id=self.user_id, log_date=today, **values)
                await self.store.create(log)
                self.state.sleep_logs.insert(0, log)
                await self._award_xp(settings.SLEEP_LOG_XP, sleep_logged_message())
        except StoreError:
            logger.exception("Error logging sleep for user {}", self.user_id)
            self.notifier.error("Failed to log sleep")
            return None

        self.notifier.success("Sleep logged successfully!")
        return log

    # --- timetable -----------------------------------------------------------

    @serialized
    async def add_timetable_entry(
        self, course: str, day: str, start_time: str, end_time: str
    ) -> Optional[TimetableEntry]:
        try:
            if not course or not course.strip():
                raise ValueError("Course name is required")
            entry = TimetableEntry(
                user_id=self.user_id,
                course=course.strip(),
                day=require_weekday(day),
                start_time=require_hhmm(start_time, "start_time"),
                end_time=require_hhmm(end_time, "end_time"),
            )
        except ValueError as e:
            self.notifier.error(str(e))
            return None

        try:
            await self.store.create(entry)
        except StoreError:
            logger.exception("Error adding timetable entry for user {}", self.user_id)
            self.notifier.error("Failed to add class")
            return None

        self.state.timetable.append(entry)
        self.notifier.success("Class added to timetable!")
        return entry

    @serialized
    async def delete_timetable_entry(self, entry_id: uuid.UUID) -> bool:
        try:
            await self.store.delete(TimetableEntry, entry_id)
        except StoreError:
            logger.exception("Error deleting timetable entry {}", entry_id)
            self.notifier.error("Failed to remove class")
            return False

        self.state.timetable = [e for e in self.state.timetable if e.id != entry_id]
        self.notifier.success("Class removed")
        return True

    # --- preferences ---------------------------------------------------------

    @serialized
    async def toggle_dark_mode(self) -> bool:
        profile = self.state.profile
        if profile is None:
            return False
        new_mode = not profile.dark_mode
        try:
            await self._update_profile(dark_mode=new_mode)
        except StoreError:
            logger.exception("Error saving dark mode for user {}", self.user_id)
            self.notifier.error("Failed to save preference")
        return profile.dark_mode

    # --- AI ------------------------------------------------------------------

    async def generate_daily_plan(self) -> str:
        self.ai_plan_loading = True
        self.ai_plan = ""
        try:
            plan = await self.planner.generate_daily_plan(
                self.today(), self.state.timetable, self.state.habits
            )
        finally:
            self.ai_plan_loading = False

        if plan is None:
            self.ai_plan = PLAN_FAILED_TEXT
            self.notifier.error("Failed to generate plan")
        else:
            self.ai_plan = plan
            self.notifier.success("Daily plan generated!")
        return self.ai_plan

    @serialized
    async def check_reminders(self, now: Optional[datetime] = None) -> Optional[str]:
        return await self.reminders.check(self.state, now or self.now())

    # --- read models ---------------------------------------------------------

    def rotate_content(self) -> CarouselContent:
        streak = self.state.profile.current_streak if self.state.profile else 0
        self.carousel = pick_content(streak, self._rng)
        return self.carousel

    def today_progress(self) -> int:
        return completion_percentage(self.state.habits, self.state.habit_logs, self.today())

    def progress(self) -> ProgressSummary:
        return summarize(self.state, self.today())
