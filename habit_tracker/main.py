from __future__ import annotations
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, NoReturn, Optional
import uuid

from fastapi import Depends, FastAPI, Header, HTTPException, Response
from loguru import logger

from .config import settings
from .db import init_db
from .scheduler.job_manager import JobManager
from .scheduler.scheduler_instance import scheduler, shutdown_scheduler, start_scheduler
from .services import session_registry
from .services.planner_service import PlannerService
from .services.tracker_session import TrackerSession
from .schemas import (
    CarouselOut,
    DashboardOut,
    HabitIn,
    HabitLogIn,
    HabitLogOut,
    HabitOut,
    HabitPatch,
    HabitStatus,
    NotificationOut,
    PlanOut,
    ProfileOut,
    ProgressOut,
    SessionOut,
    SleepIn,
    SleepOut,
    TimetableIn,
    TimetableOut,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # --- startup ---
    logger.remove()
    logger.add(lambda msg: print(msg, end=""), level=settings.LOG_LEVEL)

    await init_db()
    start_scheduler()
    logger.info("Habit tracker started ({})", settings.ENV)

    yield

    # --- shutdown ---
    for user_id in session_registry.user_ids():
        JobManager.remove_session_jobs(user_id)
    session_registry.clear()
    shutdown_scheduler()
    await planner.client.aclose()
    logger.info("Habit tracker shut down")


app = FastAPI(title="Smart Habit Tracker", lifespan=lifespan)

# One AI client shared by every session
planner = PlannerService()


def _parse_user_id(raw: Optional[str]) -> Optional[uuid.UUID]:
    if raw is None:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="X-User-Id must be a UUID")


def get_tracker(x_user_id: Optional[str] = Header(default=None)) -> TrackerSession:
    user_id = _parse_user_id(x_user_id)
    tracker = session_registry.get(user_id) if user_id else None
    if tracker is None:
        raise HTTPException(status_code=404, detail="No active session; POST /session first")
    return tracker


def _fail(tracker: TrackerSession, status_code: int = 400) -> NoReturn:
    messages = tracker.notifier.messages()
    raise HTTPException(status_code=status_code, detail=messages[-1] if messages else "Request failed")


def _teardown(user_id: uuid.UUID) -> None:
    JobManager.remove_session_jobs(user_id)
    session_registry.remove(user_id)


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "scheduler_running": scheduler.running if scheduler else False,
        "jobs_count": len(scheduler.get_jobs()) if scheduler and scheduler.running else 0,
        "sessions": session_registry.count(),
    }


@app.post("/session", response_model=SessionOut)
async def start_session(x_user_id: Optional[str] = Header(default=None)):
    """Anonymous sign-in. Re-authenticating an id replaces its previous session."""
    user_id = _parse_user_id(x_user_id)
    if user_id is not None and session_registry.get(user_id) is not None:
        _teardown(user_id)

    tracker = await TrackerSession.start(user_id, planner=planner)
    if tracker.profile is None:
        _fail(tracker, status_code=503)

    session_registry.register(tracker)
    JobManager.schedule_session_jobs(tracker.user_id)
    return SessionOut(user_id=tracker.user_id, profile=ProfileOut.model_validate(tracker.profile))


@app.delete("/session", status_code=204)
async def end_session(tracker: TrackerSession = Depends(get_tracker)):
    _teardown(tracker.user_id)
    return Response(status_code=204)


@app.get("/dashboard", response_model=DashboardOut)
async def dashboard(tracker: TrackerSession = Depends(get_tracker)):
    return DashboardOut(
        profile=ProfileOut.model_validate(tracker.profile) if tracker.profile else None,
        today_progress=tracker.today_progress(),
        habits=[
            HabitStatus(
                habit=HabitOut.model_validate(habit),
                log=HabitLogOut.model_validate(log) if log else None,
                complete=complete,
            )
            for habit, log, complete in tracker.today_habit_status()
        ],
        carousel=CarouselOut.model_validate(tracker.carousel),
    )


@app.get("/habits", response_model=List[HabitOut])
async def list_habits(tracker: TrackerSession = Depends(get_tracker)):
    return [HabitOut.model_validate(h) for h in tracker.state.habits]


@app.post("/habits", response_model=HabitOut, status_code=201)
async def create_habit(body: HabitIn, tracker: TrackerSession = Depends(get_tracker)):
    habit = await tracker.create_habit(**body.model_dump())
    if habit is None:
        _fail(tracker)
    return HabitOut.model_validate(habit)


@app.patch("/habits/{habit_id}", response_model=HabitOut)
async def update_habit(habit_id: uuid.UUID, body: HabitPatch, tracker: TrackerSession = Depends(get_tracker)):
    if tracker.state.find_habit(habit_id) is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    habit = await tracker.update_habit(habit_id, **body.model_dump(exclude_none=True))
    if habit is None:
        _fail(tracker)
    return HabitOut.model_validate(habit)


@app.delete("/habits/{habit_id}", status_code=204)
async def delete_habit(habit_id: uuid.UUID, tracker: TrackerSession = Depends(get_tracker)):
    if tracker.state.find_habit(habit_id) is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    if not await tracker.delete_habit(habit_id):
        _fail(tracker, status_code=500)
    return Response(status_code=204)


@app.post("/habits/{habit_id}/log", response_model=HabitLogOut)
async def log_habit(habit_id: uuid.UUID, body: HabitLogIn, tracker: TrackerSession = Depends(get_tracker)):
    if tracker.state.find_habit(habit_id) is None:
        raise HTTPException(status_code=404, detail="Habit not found")
    log = await tracker.log_habit(habit_id, body.value)
    if log is None:
        _fail(tracker, status_code=500)
    return HabitLogOut.model_validate(log)


@app.get("/sleep", response_model=List[SleepOut])
async def list_sleep(tracker: TrackerSession = Depends(get_tracker)):
    return [SleepOut.model_validate(s) for s in tracker.state.sleep_logs]


@app.post("/sleep", response_model=SleepOut)
async def log_sleep(body: SleepIn, tracker: TrackerSession = Depends(get_tracker)):
    log = await tracker.log_sleep(body.bedtime, body.wake_time, body.quality)
    if log is None:
        _fail(tracker)
    return SleepOut.model_validate(log)


@app.get("/timetable", response_model=List[TimetableOut])
async def list_timetable(tracker: TrackerSession = Depends(get_tracker)):
    return [TimetableOut.model_validate(e) for e in tracker.state.timetable]


@app.post("/timetable", response_model=TimetableOut, status_code=201)
async def add_timetable_entry(body: TimetableIn, tracker: TrackerSession = Depends(get_tracker)):
    entry = await tracker.add_timetable_entry(**body.model_dump())
    if entry is None:
        _fail(tracker)
    return TimetableOut.model_validate(entry)


@app.delete("/timetable/{entry_id}", status_code=204)
async def delete_timetable_entry(entry_id: uuid.UUID, tracker: TrackerSession = Depends(get_tracker)):
    if not any(e.id == entry_id for e in tracker.state.timetable):
        raise HTTPException(status_code=404, detail="Timetable entry not found")
    if not await tracker.delete_timetable_entry(entry_id):
        _fail(tracker, status_code=500)
    return Response(status_code=204)


@app.post("/plan", response_model=PlanOut)
async def generate_plan(tracker: TrackerSession = Depends(get_tracker)):
    return PlanOut(plan=await tracker.generate_daily_plan())


@app.get("/progress", response_model=ProgressOut)
async def progress(tracker: TrackerSession = Depends(get_tracker)):
    return ProgressOut.model_validate(tracker.progress())


@app.post("/profile/dark-mode", response_model=ProfileOut)
async def toggle_dark_mode(tracker: TrackerSession = Depends(get_tracker)):
    await tracker.toggle_dark_mode()
    return ProfileOut.model_validate(tracker.profile)


@app.get("/notifications", response_model=List[NotificationOut])
async def notifications(tracker: TrackerSession = Depends(get_tracker)):
    return [NotificationOut.model_validate(n) for n in tracker.notifier.active()]
