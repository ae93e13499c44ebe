from __future__ import annotations

from .answering import answering_dialog
from .authoring import authoring_dialog
from .editing import editing_dialog
from .registration import registration_dialog
from .roles import grant_teacher_dialog, revoke_teacher_dialog

DIALOGS = (
    registration_dialog,
    authoring_dialog,
    editing_dialog,
    answering_dialog,
    grant_teacher_dialog,
    revoke_teacher_dialog,
)

__all__ = ["DIALOGS"]
