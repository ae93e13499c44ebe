# assessbot/main.py
import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from assessbot.config import Settings
from assessbot.database import Database
from assessbot.engine.dialog_engine import DialogEngine
from assessbot.handlers import router as handlers_router
from assessbot.scheduler import setup_scheduler
from assessbot.utils.membership import ChannelMembershipGate
from assessbot.utils.transport import BotTransport


def setup_logging(is_dev: bool) -> None:
    """
    Clean production logging:
    - app logs: INFO (or DEBUG in dev)
    - SQLAlchemy logs: WARNING+ (no query/pool spam)
    """
    app_level = logging.DEBUG if is_dev else logging.INFO

    logging.basicConfig(
        level=app_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    for name in (
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.pool",
        "sqlalchemy.orm",
        "aiosqlite",
        "apscheduler",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)


async def main() -> None:
    settings = Settings.load()
    setup_logging(settings.is_dev)
    log = logging.getLogger("assessbot")

    db = Database(settings.database_url)
    await db.init_models()
    log.info("DB initialized")

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )

    gate = None
    if settings.required_channels:
        gate = ChannelMembershipGate(bot, settings.required_channels)
        log.info("Membership gate on: %s", ", ".join(settings.required_channels))

    engine = DialogEngine(
        db=db,
        settings=settings,
        transport=BotTransport(bot),
        gate=gate,
    )

    dp = Dispatcher()

    # Inject workflow data
    dp.workflow_data["settings"] = settings
    dp.workflow_data["engine"] = engine

    dp.include_router(handlers_router)

    # TTL sweep for abandoned dialogs
    scheduler = setup_scheduler(engine=engine)
    log.info("Scheduler started")

    try:
        await dp.start_polling(bot)
    except (asyncio.CancelledError, KeyboardInterrupt):
        pass
    except Exception:
        log.exception("Bot crashed")
        raise
    finally:
        # Stop scheduler
        try:
            scheduler.shutdown(wait=False)
        except Exception:
            log.exception("Failed to shutdown scheduler")

        # Close DB + bot session
        try:
            await db.close()
        except Exception:
            log.exception("Failed to close DB")

        try:
            await bot.session.close()
        except Exception:
            log.exception("Failed to close bot session")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
