from __future__ import annotations
from datetime import date
from typing import Optional, Sequence

from loguru import logger

from ..llm.gemini_client import GeminiClient
from ..models.habit import Habit
from ..models.timetable import TimetableEntry
from ..utils.dates import weekday_name

PLAN_FAILED_TEXT = "Failed to generate plan. Please try again."


def reminder_prompt(habit_name: str) -> str:
    return (
        "Generate a short, encouraging reminder (max 15 words) for a college student "
        f'to complete their habit: "{habit_name}". Be friendly and motivating.'
    )


def daily_plan_prompt(day: date, timetable: Sequence[TimetableEntry], habits: Sequence[Habit]) -> str:
    day_name = weekday_name(day)
    classes = [e for e in timetable if e.day == day_name]
    daily_habits = [h for h in habits if h.is_daily]

    class_lines = (
        "\n".join(f"- {c.course}: {c.start_time} - {c.end_time}" for c in classes)
        if classes else "- No classes scheduled"
    )
    habit_lines = (
        "\n".join(
            f"- {h.name}" + (f" ({h.goal_value} {h.unit})" if h.unit else "")
            for h in daily_habits
        )
        if daily_habits else "- No habits set"
    )

    return (
        "You are a highly efficient college schedule assistant. Create a realistic, healthy "
        f"daily schedule for a college student for today ({day_name}).\n\n"
        f"Classes today:\n{class_lines}\n\n"
        f"Daily habits to incorporate:\n{habit_lines}\n\n"
        "Provide a clear, easy-to-read hourly schedule that balances academic time, habits, "
        'meals, and rest. Format as time blocks (e.g., "9:00 AM - 10:00 AM: Morning routine"). '
        "Keep it concise and realistic."
    )


class PlannerService:
    """
    AI-backed reminder and daily plan text. Every failure comes back as None.
    """

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    async def generate_reminder(self, habit_name: str) -> Optional[str]:
        text = await self.client.generate_text(reminder_prompt(habit_name))
        if text is None:
            logger.info("No reminder generated for habit '{}'", habit_name)
            return None
        return text.strip()

    async def generate_daily_plan(
        self,
        day: date,
        timetable: Sequence[TimetableEntry],
        habits: Sequence[Habit],
    ) -> Optional[str]:
        return await self.client.generate_text(daily_plan_prompt(day, timetable, habits))
