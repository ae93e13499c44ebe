# assessbot/engine/registry.py
from __future__ import annotations

from typing import Awaitable, Callable, Iterable

from assessbot.engine.context import StepContext
from assessbot.engine.outcome import StepOutcome
from assessbot.engine.state import DialogKind, DialogState

Handler = Callable[[StepContext], Awaitable[StepOutcome]]


class Dialog:
    """
    Ordered steps of one dialog kind.

        registration_dialog = Dialog(DialogKind.REGISTRATION)

        @registration_dialog.step(1)
        async def intro(ctx): ...
    """

    def __init__(self, kind: DialogKind) -> None:
        self.kind = kind
        self.steps: dict[int, Handler] = {}

    def step(self, number: int) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            if number in self.steps:
                raise ValueError(f"{self.kind.value} step {number} registered twice")
            self.steps[number] = fn
            return fn

        return decorator


def build_step_table(dialogs: Iterable[Dialog]) -> dict[DialogState, Handler]:
    table: dict[DialogState, Handler] = {}
    for dialog in dialogs:
        expected = list(range(1, len(dialog.steps) + 1))
        if sorted(dialog.steps) != expected:
            raise ValueError(f"{dialog.kind.value} steps must be numbered 1..n, got {sorted(dialog.steps)}")
        for number, handler in dialog.steps.items():
            table[DialogState(dialog.kind, number)] = handler
    return table


def parse_button(data: str) -> tuple[str, str | None]:
    """
    "test:edit:12" -> ("test:edit", "12"), "admin:add_teacher" -> ("admin:add_teacher", None)
    """
    parts = (data or "").split(":")
    if len(parts) >= 3:
        return ":".join(parts[:2]), ":".join(parts[2:])
    return data or "", None


class ActionTable:
    """Idle-mode actions keyed by command / menu label and by button action."""

    def __init__(self) -> None:
        self.commands: dict[str, Handler] = {}
        self.buttons: dict[str, Handler] = {}

    def command(self, *names: str) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            for name in names:
                if name in self.commands:
                    raise ValueError(f"Command {name!r} registered twice")
                self.commands[name] = fn
            return fn

        return decorator

    def button(self, action: str) -> Callable[[Handler], Handler]:
        def decorator(fn: Handler) -> Handler:
            if action in self.buttons:
                raise ValueError(f"Button {action!r} registered twice")
            self.buttons[action] = fn
            return fn

        return decorator

    def include(self, other: "ActionTable") -> None:
        for name, fn in other.commands.items():
            self.command(name)(fn)
        for action, fn in other.buttons.items():
            self.button(action)(fn)

    def is_command(self, text: str | None) -> bool:
        return bool(text) and command_key(text) in self.commands


def command_key(text: str) -> str:
    """"/start payload" -> "/start", menu labels are matched verbatim."""
    raw = (text or "").strip()
    if raw.startswith("/"):
        head = raw.split(maxsplit=1)[0]
        return head.split("@", 1)[0].lower()
    return raw
