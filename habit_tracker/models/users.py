from typing import Optional
from datetime import datetime, timezone
import uuid

from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, Column


class UserProfile(SQLModel, table=True):
    """
    Per-user gamification record: XP, level, streak counters and UI preference.
    """
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    email: Optional[str] = Field(default=None, unique=True)

    xp: int = Field(default=0)
    level: int = Field(default=1)
    current_streak: int = Field(default=0)
    max_streak: int = Field(default=0)
    dark_mode: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
