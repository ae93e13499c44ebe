# assessbot/engine/outcome.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping

from assessbot.engine.events import Reply
from assessbot.engine.state import DialogKind


class OutcomeKind(str, enum.Enum):
    REPROMPT = "reprompt"  # stay on the same step, no state change
    ADVANCE = "advance"  # merge fields, move to the next step
    FINISH = "finish"  # success, session cleared
    ABORT = "abort"  # permission / lookup failure, session cleared
    START = "start"  # enter a dialog and run its first step on the same event
    WAIT = "wait"  # enter a dialog, its first step consumes the next input


def _replies(items: tuple[Reply | str, ...]) -> tuple[Reply, ...]:
    return tuple(Reply(text=i) if isinstance(i, str) else i for i in items)


@dataclass(frozen=True, slots=True)
class StepOutcome:
    kind: OutcomeKind
    replies: tuple[Reply, ...] = ()
    fields: Mapping[str, Any] = field(default_factory=dict)
    dialog: DialogKind | None = None

    @classmethod
    def reprompt(cls, *replies: Reply | str) -> "StepOutcome":
        return cls(OutcomeKind.REPROMPT, _replies(replies))

    # idle actions answer without touching the session
    reply = reprompt

    @classmethod
    def advance(cls, *replies: Reply | str, **fields: Any) -> "StepOutcome":
        return cls(OutcomeKind.ADVANCE, _replies(replies), fields)

    @classmethod
    def finish(cls, *replies: Reply | str) -> "StepOutcome":
        return cls(OutcomeKind.FINISH, _replies(replies))

    @classmethod
    def abort(cls, *replies: Reply | str) -> "StepOutcome":
        return cls(OutcomeKind.ABORT, _replies(replies))

    @classmethod
    def start(cls, dialog: DialogKind, *replies: Reply | str, **fields: Any) -> "StepOutcome":
        return cls(OutcomeKind.START, _replies(replies), fields, dialog)

    @classmethod
    def wait(cls, dialog: DialogKind, *replies: Reply | str, **fields: Any) -> "StepOutcome":
        return cls(OutcomeKind.WAIT, _replies(replies), fields, dialog)
