# assessbot/engine/state.py
from __future__ import annotations

import enum
from typing import NamedTuple


class DialogKind(str, enum.Enum):
    NONE = "none"
    REGISTRATION = "registration"
    TEST_AUTHORING = "test_authoring"
    TEST_EDITING = "test_editing"
    AWAITING_ANSWERS = "awaiting_answers"
    AWAITING_TEACHER_ID = "awaiting_teacher_id"
    AWAITING_TEACHER_REMOVAL = "awaiting_teacher_removal"


class DialogState(NamedTuple):
    kind: DialogKind
    step: int

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.step}"
