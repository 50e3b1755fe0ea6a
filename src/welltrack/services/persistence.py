"""Persistence adapter used by the effect dispatcher."""
import asyncio
import logging
from typing import Callable, List, TypeVar
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from welltrack.core.exceptions import PersistenceError
from welltrack.repositories.challenge_repository import ChallengeRepository
from welltrack.repositories.datalog_repository import DataLogRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlPersistence:
    """
    Runs sync SQLAlchemy repository calls from async code.

    Each operation opens its own session inside ``asyncio.to_thread()``
    so the event loop is never blocked and no session is shared between
    operations. Any data-store failure is raised as ``PersistenceError``.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """
        Initialize persistence adapter.

        Args:
            session_factory: Callable returning a new SQLAlchemy session
        """
        self.session_factory = session_factory

    async def insert_observation(
        self,
        subject_id: str,
        tired: bool,
        drinking: bool,
        bad_posture: bool,
    ) -> int:
        """
        Insert an observation row for a subject.

        Returns:
            int: ID of the inserted row
        """
        user_id = self._user_id(subject_id)

        def insert(session: Session) -> int:
            row = DataLogRepository(session).create(
                user_id=user_id,
                is_tired=tired,
                is_drinking=drinking,
                is_badpos=bad_posture,
            )
            return row.id

        return await asyncio.to_thread(self._run, "insert_observation", insert)

    async def increment_progress(self, metric: str, subject_id: str) -> int:
        """
        Increment a named progress counter for a subject.

        Returns:
            int: Number of challenges advanced
        """
        user_id = self._user_id(subject_id)
        return await asyncio.to_thread(
            self._run,
            "increment_progress",
            lambda session: ChallengeRepository(session).increment_progress(metric, user_id),
        )

    async def flag_challenges_started(self, subject_id: str, digit_count: int) -> List[str]:
        """
        Mark started every challenge of a subject triggered by ``digit_count``.

        Returns:
            List[str]: Names of the flagged challenges
        """
        user_id = self._user_id(subject_id)
        return await asyncio.to_thread(
            self._run,
            "flag_challenges_started",
            lambda session: ChallengeRepository(session).mark_started_by_fingers(
                user_id, digit_count
            ),
        )

    def _run(self, operation: str, fn: Callable[[Session], T]) -> T:
        session = self.session_factory()
        try:
            return fn(session)
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"{operation} failed: {e}") from e
        finally:
            session.close()

    @staticmethod
    def _user_id(subject_id: str) -> int:
        try:
            return int(subject_id)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Invalid subject id: {subject_id!r}") from e
