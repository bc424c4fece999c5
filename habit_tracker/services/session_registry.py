from __future__ import annotations
from typing import Dict, List, Optional
import uuid

from loguru import logger

from .tracker_session import TrackerSession

_sessions: Dict[uuid.UUID, TrackerSession] = {}


def get(user_id: uuid.UUID) -> Optional[TrackerSession]:
    return _sessions.get(user_id)


def register(session: TrackerSession) -> None:
    _sessions[session.user_id] = session
    logger.info("Registered session for user {}", session.user_id)


def remove(user_id: uuid.UUID) -> Optional[TrackerSession]:
    session = _sessions.pop(user_id, None)
    if session is not None:
        logger.info("Removed session for user {}", user_id)
    return session


def user_ids() -> List[uuid.UUID]:
    return list(_sessions)


def count() -> int:
    return len(_sessions)


def clear() -> None:
    _sessions.clear()
