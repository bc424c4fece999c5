from __future__ import annotations
from typing import Any, List, Optional, Type, TypeVar
import uuid

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, select
from loguru import logger

from ..db import AsyncSessionLocal, get_session
from ..models.users import UserProfile
from ..models.habit import Habit, HabitLog
from ..models.sleep import SleepLog
from ..models.timetable import TimetableEntry
from ..models.state import AppState

ModelT = TypeVar("ModelT", bound=SQLModel)

SLEEP_HISTORY_LIMIT = 7


class StoreError(Exception):
    """A persistence call failed; the original SQLAlchemy error is chained."""


class HabitStore:
    """
    Row CRUD over the five owner-scoped relations.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    async def create(self, row: ModelT) -> ModelT:
        try:
            async with get_session(self.session_factory) as session:
                session.add(row)
                await session.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to insert into {row.__tablename__}") from e
        return row

    async def list_by_owner(
        self,
        model: Type[ModelT],
        user_id: uuid.UUID,
        order_by: str,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        column = getattr(model, order_by)
        stmt = select(model).where(model.user_id == user_id).order_by(column.desc() if descending else column)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            async with get_session(self.session_factory) as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read {model.__tablename__}") from e

    async def update(self, model: Type[ModelT], row_id: uuid.UUID, **values: Any) -> None:
        try:
            async with get_session(self.session_factory) as session:
                await session.execute(update(model).where(model.id == row_id).values(**values))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to update {model.__tablename__} {row_id}") from e

    async def delete(self, model: Type[ModelT], row_id: uuid.UUID) -> None:
        try:
            async with get_session(self.session_factory) as session:
                await session.execute(delete(model).where(model.id == row_id))
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete {model.__tablename__} {row_id}") from e

    async def get_profile(self, user_id: uuid.UUID) -> Optional[UserProfile]:
        try:
            async with get_session(self.session_factory) as session:
                return await session.get(UserProfile, user_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read profile {user_id}") from e

    async def create_profile(self, user_id: uuid.UUID) -> None:
        """Insert a fresh profile; an existing row for the same id is left alone."""
        try:
            async with get_session(self.session_factory) as session:
                session.add(UserProfile(id=user_id, xp=0, level=1, current_streak=0, max_streak=0))
                await session.flush()
            logger.info("Created profile {}", user_id)
        except IntegrityError:
            logger.info("Profile {} already exists", user_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create profile {user_id}") from e

    async def load_state(self, user_id: uuid.UUID) -> AppState:
        """Read everything the session needs; creates the profile on first visit."""
        profile = await self.get_profile(user_id)
        if profile is None:
            await self.create_profile(user_id)
            profile = await self.get_profile(user_id)

        return AppState(
            profile=profile,
            habits=await self.list_by_owner(Habit, user_id, "created_at"),
            habit_logs=await self.list_by_owner(HabitLog, user_id, "log_date", descending=True),
            sleep_logs=await self.list_by_owner(
                SleepLog, user_id, "log_date", descending=True, limit=SLEEP_HISTORY_LIMIT
            ),
            timetable=await self.list_by_owner(TimetableEntry, user_id, "day"),
        )
