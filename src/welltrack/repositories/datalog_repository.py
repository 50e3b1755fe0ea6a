"""DataLog repository for database operations."""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from welltrack.models.datalog import DataLog


class DataLogRepository:
    """Repository for DataLog database operations."""

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(
        self,
        user_id: int,
        is_tired: bool,
        is_drinking: bool,
        is_badpos: bool,
    ) -> DataLog:
        """
        Insert an observation row.

        Args:
            user_id: Subject identifier
            is_tired: Fatigue signal
            is_drinking: Drinking signal
            is_badpos: Bad posture signal

        Returns:
            DataLog: Created row
        """
        row = DataLog(
            user_id=user_id,
            is_tired=is_tired,
            is_drinking=is_drinking,
            is_badpos=is_badpos,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def get_by_user(
        self, user_id: int, since: Optional[datetime] = None
    ) -> List[DataLog]:
        """
        List observation rows for a subject, oldest first.

        Args:
            user_id: Subject identifier
            since: Only rows created at or after this time

        Returns:
            List[DataLog]: Matching rows
        """
        query = self.db.query(DataLog).filter(DataLog.user_id == user_id)
        if since is not None:
            query = query.filter(DataLog.created_at >= since)
        return query.order_by(DataLog.created_at.asc(), DataLog.id.asc()).all()
