# assessbot/utils/dates.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

DEADLINE_FORMAT = "%d.%m.%Y %H:%M"  # DD.MM.YYYY HH:mm
FILENAME_STAMP_FORMAT = "%d_%m_%Y_%H_%M"


def utc_now() -> datetime:
    # store in DB as naive UTC (timezone=False columns)
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True, slots=True)
class TimeProvider:
    """Converts between naive UTC (storage) and the configured local zone (user input/display)."""

    timezone: str = "UTC"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def parse_deadline(self, text: str) -> datetime:
        """
        Parses "DD.MM.YYYY HH:mm" typed in the local zone.
        Returns naive UTC. Raises ValueError when the text does not match.
        """
        raw = (text or "").strip()
        if not raw:
            raise ValueError("Deadline is empty")
        try:
            local = datetime.strptime(raw, DEADLINE_FORMAT)
        except ValueError as e:
            raise ValueError(f"Invalid deadline {raw!r}, expected DD.MM.YYYY HH:mm") from e
        return local.replace(tzinfo=self.tz).astimezone(timezone.utc).replace(tzinfo=None)

    def to_local(self, value: datetime) -> datetime:
        return value.replace(tzinfo=timezone.utc).astimezone(self.tz)

    def format(self, value: datetime | None) -> str:
        if value is None:
            return "-"
        return self.to_local(value).strftime(DEADLINE_FORMAT)

    def stamp(self, value: datetime) -> str:
        return self.to_local(value).strftime(FILENAME_STAMP_FORMAT)
