from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..config import settings

XP_ICON = "⚡"
LEVEL_UP_ICON = "🎉"
STREAK_ICON = "🏆"

STREAK_MILESTONE_DAYS = 7
STREAK_MILESTONE_MESSAGE = "🔥 7-Day Streak! You absolute legend! Keep the fire burning! 🔥"


@dataclass(frozen=True)
class XpAward:
    xp: int
    level: int
    leveled_up: bool
    message: str
    icon: str


def level_for_xp(xp: int, xp_per_level: Optional[int] = None) -> int:
    """Level tier for a point total: floor(xp / xp_per_level) + 1."""
    per_level = xp_per_level or settings.XP_PER_LEVEL
    return max(xp, 0) // per_level + 1


def habit_completed_message(habit_name: str, amount: Optional[int] = None) -> str:
    amount = amount if amount is not None else settings.HABIT_COMPLETION_XP
    return f"+{amount} XP! {habit_name} completed! That's how you grind! 💪"


def sleep_logged_message(amount: Optional[int] = None) -> str:
    amount = amount if amount is not None else settings.SLEEP_LOG_XP
    return f"+{amount} XP for logging sleep! Rest is progress too! 😴"


def apply_award(current_xp: int, current_level: int, amount: int, message: Optional[str] = None) -> XpAward:
    """
    Compute the ledger after adding `amount` XP.

    The level-up message wins over the caller's message, which wins over the
    generic "+N XP" text.
    """
    new_xp = current_xp + amount
    new_level = level_for_xp(new_xp)
    leveled_up = new_level > current_level

    if leveled_up:
        text = f"🎉 Level Up! You're now Level {new_level}! That's how you grind! 💪"
        icon = LEVEL_UP_ICON
    elif message:
        text, icon = message, XP_ICON
    else:
        text, icon = f"+{amount} XP! Keep crushing it! 🔥", XP_ICON

    return XpAward(xp=new_xp, level=new_level, leveled_up=leveled_up, message=text, icon=icon)
