from __future__ import annotations

from assessbot.engine.registry import ActionTable

from .admin import actions as admin_actions
from .start import actions as start_actions
from .student import actions as student_actions
from .teacher import actions as teacher_actions

ACTIONS = ActionTable()
ACTIONS.include(start_actions)
ACTIONS.include(teacher_actions)
ACTIONS.include(student_actions)
ACTIONS.include(admin_actions)

__all__ = ["ACTIONS"]
