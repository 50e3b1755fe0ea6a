"""Result history for analysis tasks, keyed by subject."""
import json
import threading
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Deque, Dict, List, Optional
from redis import Redis
from welltrack.config import Settings
from welltrack.core.enums import ResultBackend
from welltrack.worker.models import AnalysisResult


class InMemoryResultStore:
    """
    Process-local result history.

    Results are appended per subject in completion order. Each subject
    keeps at most ``history_limit`` results (oldest evicted first) and
    results older than ``ttl_seconds`` are dropped on access. Every write
    also sweeps idle subjects, so their keys do not outlive the TTL.
    """

    def __init__(self, history_limit: int = 100, ttl_seconds: int = 0):
        """
        Initialize result store.

        Args:
            history_limit: Results kept per subject (0 = unbounded)
            ttl_seconds: Maximum result age in seconds (0 = no expiry)
        """
        self.history_limit = history_limit or None
        self.ttl_seconds = ttl_seconds
        self._results: Dict[str, Deque[AnalysisResult]] = {}
        self._lock = threading.Lock()

    def record(self, subject_id: str, result: AnalysisResult) -> None:
        """
        Append a result to a subject's history.

        Args:
            subject_id: Subject identifier
            result: Result to append
        """
        with self._lock:
            history = self._results.get(subject_id)
            if history is None:
                history = deque(maxlen=self.history_limit)
                self._results[subject_id] = history
            history.append(result)
            self._sweep()

    def fetch(self, subject_id: str) -> List[AnalysisResult]:
        """
        Get a subject's result history, oldest first.

        Args:
            subject_id: Subject identifier

        Returns:
            List[AnalysisResult]: Results, empty if none
        """
        with self._lock:
            self._expire(subject_id)
            return list(self._results.get(subject_id, ()))

    def subjects(self) -> List[str]:
        """List subjects that have at least one unexpired result."""
        with self._lock:
            self._sweep()
            return [subject for subject, history in self._results.items() if history]

    def clear(self) -> None:
        """Delete every stored result."""
        with self._lock:
            self._results.clear()

    def _expire(self, subject_id: str) -> None:
        history = self._results.get(subject_id)
        if not history or not self.ttl_seconds:
            return
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=self.ttl_seconds)
        while history and history[0].completed_at < cutoff:
            history.popleft()
        if not history:
            del self._results[subject_id]

    def _sweep(self) -> None:
        # Subjects that stop sending images are only reclaimed here
        if not self.ttl_seconds:
            return
        for subject_id in list(self._results):
            self._expire(subject_id)


class RedisResultStore:
    """
    Redis-backed result history.

    Each subject's results live in a Redis list of JSON documents. Writes
    trim the list to ``history_limit`` and refresh the key's TTL, so a
    subject with no new results expires as a whole.
    """

    def __init__(
        self,
        redis: Redis,
        history_limit: int = 100,
        ttl_seconds: int = 0,
        key_prefix: str = "welltrack:results",
    ):
        """
        Initialize Redis result store.

        Args:
            redis: Redis client instance (``decode_responses=True``)
            history_limit: Results kept per subject (0 = unbounded)
            ttl_seconds: Maximum result age in seconds (0 = no expiry)
            key_prefix: Prefix of the per-subject list keys
        """
        self.redis = redis
        self.history_limit = history_limit
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix

    def _key(self, subject_id: str) -> str:
        return f"{self.key_prefix}:{subject_id}"

    def record(self, subject_id: str, result: AnalysisResult) -> None:
        """
        Append a result to a subject's history.

        Args:
            subject_id: Subject identifier
            result: Result to append
        """
        key = self._key(subject_id)
        pipe = self.redis.pipeline()
        pipe.rpush(key, json.dumps(result.to_dict()))
        if self.history_limit:
            pipe.ltrim(key, -self.history_limit, -1)
        if self.ttl_seconds:
            pipe.expire(key, self.ttl_seconds)
        pipe.execute()

    def fetch(self, subject_id: str) -> List[AnalysisResult]:
        """
        Get a subject's result history, oldest first.

        Args:
            subject_id: Subject identifier

        Returns:
            List[AnalysisResult]: Results, empty if none
        """
        items = self.redis.lrange(self._key(subject_id), 0, -1)
        results = [AnalysisResult.from_dict(json.loads(item)) for item in items]
        if self.ttl_seconds:
            cutoff = datetime.now(timezone.utc) - timedelta(seconds=self.ttl_seconds)
            results = [result for result in results if result.completed_at >= cutoff]
        return results

    def subjects(self) -> List[str]:
        """List subjects that have at least one stored result."""
        prefix = f"{self.key_prefix}:"
        return [key[len(prefix):] for key in self.redis.scan_iter(match=f"{prefix}*")]

    def clear(self) -> None:
        """Delete every stored result."""
        keys = list(self.redis.scan_iter(match=f"{self.key_prefix}:*"))
        if keys:
            self.redis.delete(*keys)


def build_result_store(settings: Settings, redis: Optional[Redis] = None):
    """
    Create the result store selected by ``RESULT_BACKEND``.

    Args:
        settings: Application settings
        redis: Redis client, required for the redis backend

    Returns:
        InMemoryResultStore | RedisResultStore: Configured store

    Raises:
        ValueError: If the backend is unknown or Redis is missing
    """
    backend = ResultBackend(settings.RESULT_BACKEND)
    if backend == ResultBackend.REDIS:
        if redis is None:
            raise ValueError("RESULT_BACKEND=redis requires a Redis client")
        return RedisResultStore(
            redis,
            history_limit=settings.RESULT_HISTORY_LIMIT,
            ttl_seconds=settings.RESULT_TTL_SECONDS,
        )
    return InMemoryResultStore(
        history_limit=settings.RESULT_HISTORY_LIMIT,
        ttl_seconds=settings.RESULT_TTL_SECONDS,
    )
