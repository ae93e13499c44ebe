from aiogram import Router

from assessbot.handlers.buttons import router as buttons_router
from assessbot.handlers.messages import router as messages_router

router = Router()

router.include_router(buttons_router)
router.include_router(messages_router)  # ✅ LAST: catches every remaining private message
