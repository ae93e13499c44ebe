# assessbot/database/models/result.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, BigInteger, DateTime, Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assessbot.database.base import Base
from assessbot.utils.dates import utc_now


class TestResult(Base):
    """
    One graded attempt per user per test (enforced by unique constraint).
    Immutable once written.
    """
    __tablename__ = "test_results"
    __test__ = False  # not a pytest class
    __table_args__ = (
        UniqueConstraint("test_id", "user_id", name="uq_test_results_test_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    test_id: Mapped[int] = mapped_column(ForeignKey("tests.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.telegram_id", ondelete="CASCADE"),
        index=True,
    )

    answers: Mapped[list[str]] = mapped_column(JSON)
    score: Mapped[float] = mapped_column(Float)  # 0..100, one decimal
    correct_count: Mapped[int] = mapped_column(Integer, default=0)

    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=utc_now, index=True)

    test: Mapped["Test"] = relationship("Test", back_populates="results")
