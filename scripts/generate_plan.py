import asyncio
import sys
import uuid

from habit_tracker.db import init_db
from habit_tracker.services.tracker_session import TrackerSession

async def main(user_id: str):
    await init_db()
    session = await TrackerSession.start(uuid.UUID(user_id))
    try:
        plan = await session.generate_daily_plan()
        print(plan)
        summary = session.progress()
        print(f"\nToday: {summary.today_percentage}% | 7-day avg: {summary.weekly_average}% "
              f"| streak: {session.profile.current_streak if session.profile else 0}")
    finally:
        await session.planner.client.aclose()

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python scripts/generate_plan.py <user-uuid>")
        sys.exit(2)
    asyncio.run(main(sys.argv[1]))
