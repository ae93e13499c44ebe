# assessbot/database/models/test.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assessbot.database.base import Base
from assessbot.utils.dates import utc_now


class Test(Base):
    """
    A multiple-choice test. `answers` is the ordered answer key,
    e.g. ["1-a", "2-c"]; it is never empty.
    """
    __tablename__ = "tests"
    __test__ = False  # not a pytest class

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(256))
    answers: Mapped[list[str]] = mapped_column(JSON)

    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=False), index=True)  # naive UTC
    created_by: Mapped[int] = mapped_column(BigInteger, index=True)  # owner telegram id

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utc_now)

    results: Mapped[list["TestResult"]] = relationship(
        "TestResult",
        back_populates="test",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def question_count(self) -> int:
        return len(self.answers or [])
