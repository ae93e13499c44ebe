# assessbot/scheduler/__init__.py
from __future__ import annotations

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from assessbot.engine.dialog_engine import DialogEngine
from assessbot.scheduler.jobs import build_scheduler


def setup_scheduler(engine: DialogEngine) -> AsyncIOScheduler:
    scheduler = build_scheduler(engine=engine)
    scheduler.start()
    return scheduler
