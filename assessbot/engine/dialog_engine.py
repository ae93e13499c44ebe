# assessbot/engine/dialog_engine.py
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Iterable

from assessbot.actions import ACTIONS
from assessbot.config import Settings
from assessbot.database.session import Database
from assessbot.dialogs import DIALOGS
from assessbot.dialogs.common import menu_reply
from assessbot.engine.context import StepContext
from assessbot.engine.events import EventKind, InboundEvent, MembershipGate, Reply, Transport
from assessbot.engine.outcome import OutcomeKind, StepOutcome
from assessbot.engine.registry import ActionTable, Dialog, Handler, build_step_table, command_key, parse_button
from assessbot.engine.session_store import SessionStore
from assessbot.services.auth import AuthService
from assessbot.utils.dates import TimeProvider, utc_now
from assessbot.utils.texts import EXPIRED_NOTICE, GENERIC_FAILURE, NOT_REGISTERED

log = logging.getLogger(__name__)


class DialogEngine:
    """
    Routes every inbound event of an identity through that identity's session.

    * Commands, menu labels and button presses are actions. They abandon any
      active dialog first, then run from idle.
    * Text and contacts feed the active dialog's current step, looked up in a
      (dialog kind, step) table.

    Events of one identity run one at a time under its lock. Each event gets
    its own DB session and a working copy of the conversation session; both
    are kept only if the whole event succeeds.
    """

    def __init__(
        self,
        *,
        db: Database,
        settings: Settings,
        transport: Transport,
        sessions: SessionStore | None = None,
        gate: MembershipGate | None = None,
        dialogs: Iterable[Dialog] = DIALOGS,
        actions: ActionTable = ACTIONS,
    ) -> None:
        self.db = db
        self.settings = settings
        self.transport = transport
        self.sessions = sessions if sessions is not None else SessionStore()
        self.gate = gate
        self.actions = actions
        self.steps = build_step_table(dialogs)
        self.auth_service = AuthService(settings)
        self.clock = TimeProvider(settings.timezone)
        self.ttl = timedelta(minutes=settings.dialog_ttl_minutes)

    async def handle(self, event: InboundEvent) -> None:
        if event.identity is None:
            raise ValueError("event has no identity")
        async with self.sessions.lock(event.identity):
            await self._handle_locked(event)

    async def _handle_locked(self, event: InboundEvent) -> None:
        now = utc_now()
        stored = self.sessions.get_or_create(event.identity)
        draft = stored.copy()

        notices: list[Reply] = []
        if draft.is_expired(now, self.ttl):
            log.info("Dialog %s of %s expired, back to idle", draft.state, event.identity)
            draft.reset()
            notices.append(Reply(text=EXPIRED_NOTICE))

        try:
            async with self.db.transaction() as db:
                ctx = StepContext(
                    event=event,
                    session=draft,
                    db=db,
                    settings=self.settings,
                    auth_service=self.auth_service,
                    clock=self.clock,
                    now=now,
                    gate=self.gate,
                )
                replies = notices + await self._dispatch(ctx)
        except Exception:
            # stored session untouched, so the user can simply retry
            log.exception("Failed to handle %s event of %s in %s", event.kind.value, event.identity, stored.state)
            await self._send(event.identity, Reply(text=GENERIC_FAILURE))
            return

        draft.touched_at = now
        self.sessions.save(draft)

        for reply in replies:
            await self._send(event.identity, reply)

    def _resolve_action(self, event: InboundEvent) -> tuple[Handler | None, str | None, bool]:
        """
        Returns (handler, button arg, is_action). Plain text that is not a
        known command or menu label is not an action.
        """
        if event.kind is EventKind.BUTTON:
            key, arg = parse_button(event.data or "")
            return self.actions.buttons.get(key), arg, True
        if event.kind is EventKind.COMMAND or (
            event.kind is EventKind.TEXT and self.actions.is_command(event.text)
        ):
            return self.actions.commands.get(command_key(event.text or "")), None, True
        return None, None, False

    async def _dispatch(self, ctx: StepContext) -> list[Reply]:
        session = ctx.session
        handler, arg, is_action = self._resolve_action(ctx.event)

        if is_action:
            if not session.is_idle:
                log.info("%s abandoned %s", ctx.identity, session.state)
                session.reset()
            if handler is None:
                log.debug("Unknown action from %s: %r", ctx.identity, ctx.event.data or ctx.event.text)
                return [Reply(text="❓ Unknown command. Send /help to see what I can do.")]
            ctx.arg = arg
            outcome = await handler(ctx)
        elif session.is_idle:
            return await self._idle_input(ctx)
        else:
            step = self.steps.get(session.state)
            if step is None:
                log.error("No handler for %s of %s, resetting", session.state, ctx.identity)
                session.reset()
                return [Reply(text=GENERIC_FAILURE)]
            outcome = await step(ctx)

        return await self._apply(ctx, outcome)

    async def _apply(self, ctx: StepContext, outcome: StepOutcome) -> list[Reply]:
        session = ctx.session
        replies = list(outcome.replies)

        if outcome.kind is OutcomeKind.REPROMPT:
            pass
        elif outcome.kind is OutcomeKind.ADVANCE:
            session.advance(**outcome.fields)
        elif outcome.kind in (OutcomeKind.FINISH, OutcomeKind.ABORT):
            log.debug("%s left %s (%s)", ctx.identity, session.state, outcome.kind.value)
            session.reset()
        elif outcome.kind in (OutcomeKind.START, OutcomeKind.WAIT):
            session.begin(outcome.dialog, **outcome.fields)
            log.info("%s entered %s", ctx.identity, session.state)
            if outcome.kind is OutcomeKind.START:
                first = self.steps[session.state]
                replies += await self._apply(ctx, await first(ctx))

        return replies

    async def _idle_input(self, ctx: StepContext) -> list[Reply]:
        auth = await ctx.auth()
        if not auth.is_registered:
            return [Reply(text=NOT_REGISTERED)]
        return [await menu_reply(ctx, "Use the menu buttons below 👇")]

    async def _send(self, identity: int, reply: Reply) -> None:
        try:
            if reply.document is not None:
                doc = reply.document
                await self.transport.send_document(identity, doc.data, doc.filename, doc.caption)
            if reply.text:
                await self.transport.send_message(identity, reply.text, reply.reply_markup)
        except Exception:
            log.exception("Failed to send reply to %s", identity)
