"""Challenge repository for database operations."""
from typing import List, Optional
from sqlalchemy.orm import Session
from welltrack.models.challenge import Challenge


class ChallengeRepository:
    """Repository for Challenge database operations."""

    def __init__(self, db: Session):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(self, user_id: int, name: str, metric: str, **fields) -> Challenge:
        """
        Create a challenge for a subject.

        Args:
            user_id: Subject identifier
            name: Display name
            metric: Progress counter that advances the challenge
            **fields: Optional columns (goal, fingers, meta, ...)

        Returns:
            Challenge: Created challenge
        """
        challenge = Challenge(user_id=user_id, name=name, metric=metric, **fields)
        self.db.add(challenge)
        self.db.commit()
        self.db.refresh(challenge)
        return challenge

    def get_by_id(self, challenge_id: int) -> Optional[Challenge]:
        """
        Retrieve challenge by ID.

        Args:
            challenge_id: Challenge primary key

        Returns:
            Optional[Challenge]: Challenge or None if not found
        """
        return self.db.query(Challenge).filter(Challenge.id == challenge_id).first()

    def get_by_user(self, user_id: int) -> List[Challenge]:
        """
        List all challenges owned by a subject.

        Args:
            user_id: Subject identifier

        Returns:
            List[Challenge]: Challenges ordered by ID
        """
        return (
            self.db.query(Challenge)
            .filter(Challenge.user_id == user_id)
            .order_by(Challenge.id.asc())
            .all()
        )

    def increment_progress(self, metric: str, user_id: int) -> int:
        """
        Atomically add one to the progress of open challenges for a metric.

        Issued as a single UPDATE so the increment happens in the store,
        not in Python.

        Args:
            metric: Progress counter name
            user_id: Subject identifier

        Returns:
            int: Number of challenges advanced
        """
        updated = (
            self.db.query(Challenge)
            .filter(
                Challenge.user_id == user_id,
                Challenge.metric == metric,
                Challenge.completed.is_(False),
            )
            .update(
                {Challenge.progress: Challenge.progress + 1},
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated

    def mark_started_by_fingers(self, user_id: int, fingers: int) -> List[str]:
        """
        Flag as started every challenge of a subject triggered by a digit count.

        Args:
            user_id: Subject identifier
            fingers: Detected digit count

        Returns:
            List[str]: Names of the matched challenges
        """
        query = self.db.query(Challenge).filter(
            Challenge.user_id == user_id,
            Challenge.fingers == fingers,
        )
        names = [challenge.name for challenge in query.all()]
        query.update({Challenge.started: True}, synchronize_session=False)
        self.db.commit()
        return names
