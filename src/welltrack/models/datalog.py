"""DataLog model: one row per analysed image."""
from datetime import datetime
from sqlalchemy import Boolean, DateTime, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column
from welltrack.core.database import Base
from welltrack.models.base import utcnow


class DataLog(Base):
    """
    Observation row written by the effect dispatcher.

    Stores the three boolean signals derived from a single inference
    response for a subject. Rows are insert-only.
    """

    __tablename__ = "datalog"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    is_tired: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_drinking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_badpos: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    __table_args__ = (
        Index("idx_datalog_user_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        """Return string representation of DataLog."""
        return (
            f"<DataLog(id={self.id}, user_id={self.user_id}, "
            f"tired={self.is_tired}, drinking={self.is_drinking}, badpos={self.is_badpos})>"
        )
