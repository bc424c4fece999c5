from datetime import datetime, date, timezone
import uuid

from sqlmodel import SQLModel, Field, UniqueConstraint
from sqlalchemy import DateTime, Column


class SleepLog(SQLModel, table=True):
    """
    One night of sleep per (user, day). total_hours is derived from bedtime/wake_time.
    """
    __tablename__ = "sleep_logs"
    __table_args__ = (UniqueConstraint("user_id", "log_date", name="uq_sleep_logs_user_date"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True, foreign_key="users.id", ondelete="CASCADE")

    bedtime: str = Field(max_length=5)  # HH:MM
    wake_time: str = Field(max_length=5)  # HH:MM
    quality: int = Field(ge=1, le=5)
    total_hours: float
    log_date: date = Field(index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
