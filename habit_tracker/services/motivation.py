from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import random

GOOD_STREAK_THRESHOLD = 3

MOTIVATIONAL_QUOTES = [
    "Done is better than perfect",
    "Consistency beats intensity",
    "Start where you are. Use what you have. Do what you can.",
    "Small progress is still progress",
    "The best time to start was yesterday. The next best time is now.",
    "You don't have to be great to start, but you have to start to be great",
    "Fall seven times, stand up eight",
    "Every expert was once a beginner",
    "Progress, not perfection",
    "Today's struggle is tomorrow's strength",
]

GOOD_STREAK_MEMES = [
    ("When you complete all habits 3 days in a row", "😎"),
    ("Me after logging my 7th day straight", "💪"),
    ("Look at me, I'm the responsible adult now", "🎓"),
    ("That feeling when your streak is on fire", "🔥"),
    ("POV: You're absolutely crushing it", "⭐"),
]

BAD_STREAK_MEMES = [
    ("Tomorrow's definitely the day... right?", "😅"),
    ("Me realizing I forgot to log yesterday", "🤦"),
    ("Starting over? We don't know her... yet.", "😬"),
    ("It's fine, streaks are just numbers anyway", "🙃"),
    ("New week, new me (for real this time)", "🌱"),
]


@dataclass(frozen=True)
class CarouselContent:
    kind: str  # "quote" or "meme"
    text: str
    emoji: Optional[str] = None


INITIAL_CONTENT = CarouselContent(kind="quote", text=MOTIVATIONAL_QUOTES[0])


def pick_content(current_streak: int, rng: Optional[random.Random] = None) -> CarouselContent:
    """Coin flip between a quote and a meme; the meme pool follows the streak."""
    rng = rng or random.Random()
    if rng.random() > 0.5:
        return CarouselContent(kind="quote", text=rng.choice(MOTIVATIONAL_QUOTES))
    pool = GOOD_STREAK_MEMES if current_streak >= GOOD_STREAK_THRESHOLD else BAD_STREAK_MEMES
    text, emoji = rng.choice(pool)
    return CarouselContent(kind="meme", text=text, emoji=emoji)
