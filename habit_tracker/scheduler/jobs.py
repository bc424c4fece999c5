from __future__ import annotations
import uuid

from loguru import logger

from ..services import session_registry

async def reminder_check_job(user_id: str):
    """Hourly habit reminder check for one session."""
    session = session_registry.get(uuid.UUID(user_id))
    if session is None:
        logger.warning("Reminder job fired for unknown session {}", user_id)
        return
    try:
        await session.check_reminders()
    except Exception as e:
        logger.exception("Error in reminder_check_job for user {}: {}", user_id, e)

async def rotate_content_job(user_id: str):
    """Swap the dashboard quote/meme."""
    session = session_registry.get(uuid.UUID(user_id))
    if session is None:
        return
    session.rotate_content()
