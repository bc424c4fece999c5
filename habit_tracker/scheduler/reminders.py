from __future__ import annotations
from datetime import datetime, timedelta
from typing import Optional

from loguru import logger

from ..config import settings
from ..models.state import AppState
from ..services.notifications import Notifier
from ..services.planner_service import PlannerService
from ..utils.dates import to_zone

REMINDER_ICON = "⚡"


class ReminderScheduler:
    """
    Nudges the user about the first unfinished daily habit, at most once per interval
    and only inside the daytime window.

    last_check lives in memory only, so a restarted process can remind twice
    within the same hour.
    """

    def __init__(
        self,
        planner: PlannerService,
        notifier: Notifier,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
        interval: Optional[timedelta] = None,
        last_check: Optional[datetime] = None,
        tz_name: Optional[str] = None,
    ):
        self.planner = planner
        self.notifier = notifier
        self.start_hour = settings.REMINDER_START_HOUR if start_hour is None else start_hour
        self.end_hour = settings.REMINDER_END_HOUR if end_hour is None else end_hour
        self.interval = interval or timedelta(minutes=settings.REMINDER_INTERVAL_MINUTES)
        self.last_check = last_check
        self.tz_name = tz_name or settings.USER_TIMEZONE

    def in_window(self, now: datetime) -> bool:
        return self.start_hour <= to_zone(now, self.tz_name).hour <= self.end_hour

    async def check(self, state: AppState, now: datetime) -> Optional[str]:
        """
        Run one reminder cycle. Returns the reminder text shown, if any.
        The window and the day are read in the user's zone, whatever zone `now` is in.
        """
        if not self.in_window(now):
            return None
        if self.last_check is not None and now - self.last_check < self.interval:
            return None

        self.last_check = now
        today = to_zone(now, self.tz_name).date()

        for habit in state.daily_habits:
            if habit.is_complete(state.find_log(habit.id, today)):
                continue
            reminder = await self.planner.generate_reminder(habit.name)
            if reminder:
                self.notifier.info(reminder, REMINDER_ICON)
                logger.info("Reminder sent for habit {}", habit.id)
            return reminder

        return None
