# assessbot/config/settings.py
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _require(env: dict[str, str], key: str) -> str:
    v = env.get(key)
    if v is None or not v.strip():
        raise RuntimeError(f"Missing required environment variable: {key}")
    return v.strip()


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _split_list(raw: str | None) -> list[str]:
    if not raw:
        return []

    # remove common bracket wrappers
    cleaned = raw.strip().strip("[](){}").strip()
    if not cleaned:
        return []

    # split by comma OR any whitespace, drop stray quotes
    parts = [p.strip().strip("'\"") for p in re.split(r"[,\s]+", cleaned)]
    return [p for p in parts if p]


def _parse_int_list(raw: str | None, key_name: str) -> list[int]:
    """
    Parses comma/space/newline separated ints.
    Accepts:
      "951258732"
      "951258732,123"
      "951258732 123"
      "[951258732, 123]"  (brackets ignored)
    """
    return [_to_int(p, key_name) for p in _split_list(raw)]


@dataclass(frozen=True, slots=True)
class Settings:
    # --- required ---
    bot_token: str

    # --- optional ---
    database_url: str = "sqlite+aiosqlite:///./assessbot.db"

    # --- roles ---
    admin_id: Optional[int] = None
    teacher_ids: tuple[int, ...] = ()

    # --- membership gate ---
    required_channels: tuple[str, ...] = ()

    # --- dialogs / time ---
    timezone: str = "UTC"
    dialog_ttl_minutes: int = 30

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    def is_admin(self, telegram_id: int) -> bool:
        return self.admin_id is not None and telegram_id == self.admin_id

    def is_seed_teacher(self, telegram_id: int) -> bool:
        """Allowlisted teachers (and the admin) get the TEACHER role at registration."""
        return self.is_admin(telegram_id) or telegram_id in self.teacher_ids

    @classmethod
    def load(cls) -> "Settings":
        """
        Loads from process env (and .env if present).
        Fails fast for required fields.
        """
        load_dotenv()
        env = os.environ

        bot_token = _require(env, "BOT_TOKEN")

        database_url = (env.get("DATABASE_URL") or "sqlite+aiosqlite:///./assessbot.db").strip()

        admin_id_raw = (env.get("ADMIN_ID") or "").strip()
        admin_id = _to_int(admin_id_raw, "ADMIN_ID") if admin_id_raw else None

        teacher_ids = tuple(_parse_int_list(env.get("TEACHER_IDS"), "TEACHER_IDS"))
        required_channels = tuple(_split_list(env.get("REQUIRED_CHANNELS")))

        timezone = (env.get("TIMEZONE") or "UTC").strip() or "UTC"

        ttl_raw = (env.get("DIALOG_TTL_MINUTES") or "").strip()
        dialog_ttl_minutes = _to_int(ttl_raw, "DIALOG_TTL_MINUTES") if ttl_raw else 30
        if dialog_ttl_minutes <= 0:
            raise RuntimeError("DIALOG_TTL_MINUTES must be positive")

        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            bot_token=bot_token,
            database_url=database_url,
            admin_id=admin_id,
            teacher_ids=teacher_ids,
            required_channels=required_channels,
            timezone=timezone,
            dialog_ttl_minutes=dialog_ttl_minutes,
            environment=environment,
        )
