from datetime import datetime, timezone
import uuid

from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, Column


class TimetableEntry(SQLModel, table=True):
    """
    A weekly class slot. Entries may overlap.
    """
    __tablename__ = "timetable_entries"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(index=True, foreign_key="users.id", ondelete="CASCADE")

    course: str = Field(max_length=200)
    day: str = Field(max_length=10)  # Monday..Sunday
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
