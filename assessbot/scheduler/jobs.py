# assessbot/scheduler/jobs.py
from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from assessbot.engine.dialog_engine import DialogEngine
from assessbot.utils.dates import utc_now
from assessbot.utils.texts import EXPIRED_NOTICE

log = logging.getLogger(__name__)


async def expire_stale_dialogs(engine: DialogEngine) -> list[int]:
    """
    Drops dialogs idle for longer than the configured TTL and tells their
    users. Idle sessions of the same age are evicted from memory too.
    """
    expired = engine.sessions.expire_stale(utc_now(), engine.ttl)
    if expired:
        log.info("Expired %d stale dialog(s)", len(expired))

    for identity in expired:
        try:
            await engine.transport.send_message(identity, EXPIRED_NOTICE)
        except Exception:
            log.exception("Failed to notify %s about expired dialog", identity)
    return expired


def build_scheduler(engine: DialogEngine) -> AsyncIOScheduler:
    """
    Creates and returns an AsyncIOScheduler with our jobs registered.
    """
    scheduler = AsyncIOScheduler(timezone="UTC")

    scheduler.add_job(
        expire_stale_dialogs,
        trigger=CronTrigger(minute="*/1", timezone="UTC"),
        kwargs={"engine": engine},
        id="expire_stale_dialogs",
        replace_existing=True,
        coalesce=True,
        misfire_grace_time=60,
    )

    return scheduler
