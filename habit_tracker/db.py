from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from loguru import logger

from .config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True, pool_pre_ping=True)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

async def init_db() -> None:
    """Create the five tracker tables if they are missing."""
    from .models.users import UserProfile
    from .models.habit import Habit, HabitLog
    from .models.sleep import SleepLog
    from .models.timetable import TimetableEntry

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables created/verified")

@asynccontextmanager
async def get_session(factory: Optional[sessionmaker] = None) -> AsyncGenerator[AsyncSession, None]:
    session = (factory or AsyncSessionLocal)()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
