from __future__ import annotations
import uuid

from loguru import logger
from apscheduler.triggers.interval import IntervalTrigger

from ..config import settings
from .scheduler_instance import scheduler

JOB_PREFIXES = ("reminders", "rotation")


class JobManager:
    """
    Manages the per-session timers: hourly reminder check and content rotation.
    """

    @staticmethod
    def schedule_session_jobs(user_id: uuid.UUID):
        """Register (or replace) both timers for a session."""
        scheduler.add_job(
            func="habit_tracker.scheduler.jobs:reminder_check_job",
            trigger=IntervalTrigger(minutes=settings.REMINDER_INTERVAL_MINUTES),
            id=f"reminders_{user_id}",
            args=[str(user_id)],
            replace_existing=True,
        )
        logger.info("Scheduled reminder check for user {} every {} min", user_id, settings.REMINDER_INTERVAL_MINUTES)

        scheduler.add_job(
            func="habit_tracker.scheduler.jobs:rotate_content_job",
            trigger=IntervalTrigger(seconds=settings.CAROUSEL_INTERVAL_SECONDS),
            id=f"rotation_{user_id}",
            args=[str(user_id)],
            replace_existing=True,
        )
        logger.info("Scheduled content rotation for user {}", user_id)

    @staticmethod
    def remove_session_jobs(user_id: uuid.UUID):
        """Cancel both timers; called on teardown and before re-authentication."""
        for prefix in JOB_PREFIXES:
            job_id = f"{prefix}_{user_id}"
            if scheduler.get_job(job_id):
                scheduler.remove_job(job_id)
                logger.info("Removed job {}", job_id)
