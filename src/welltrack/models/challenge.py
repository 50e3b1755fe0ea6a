"""Challenge model: per-subject goals driven by progress counters."""
from typing import Any, Dict, Optional
from sqlalchemy import JSON, Boolean, CheckConstraint, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from welltrack.core.database import Base
from welltrack.models.base import TimestampMixin


class Challenge(Base, TimestampMixin):
    """
    Challenge owned by a subject.

    ``metric`` names the progress counter that advances it (``fatigue``,
    ``drink``, ``bad_posture``, ``rest``). ``fingers`` is the digit count
    that marks the challenge as started when the camera detects it.
    """

    __tablename__ = "challenges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    metric: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    meta: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # Progress tracking
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    goal: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Finger-triggered start
    fingers: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    started: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("progress >= 0", name="check_progress_non_negative"),
        Index("idx_challenges_user_metric", "user_id", "metric"),
        Index("idx_challenges_user_fingers", "user_id", "fingers"),
    )

    def __repr__(self) -> str:
        """Return string representation of Challenge."""
        return (
            f"<Challenge(id={self.id}, user_id={self.user_id}, metric={self.metric}, "
            f"progress={self.progress}, started={self.started})>"
        )
