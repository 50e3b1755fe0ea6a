"""Unit tests for the result stores."""
import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, Mock
import pytest
from welltrack.config import Settings
from welltrack.services.result_store import (
    InMemoryResultStore,
    RedisResultStore,
    build_result_store,
)
from welltrack.worker.models import AnalysisResult, Observation


def make_result(task_id: str = "t1", subject_id: str = "42", age_seconds: float = 0) -> AnalysisResult:
    return AnalysisResult(
        task_id=task_id,
        subject_id=subject_id,
        message="Analysis completed",
        observation=Observation(tired=True, digit_count=3),
        completed_at=datetime.now(timezone.utc) - timedelta(seconds=age_seconds),
    )


class TestInMemoryResultStore:
    """Test InMemoryResultStore."""

    def test_fetch_unknown_subject_is_empty(self):
        """Test fetching a subject with no results returns an empty list."""
        assert InMemoryResultStore().fetch("nobody") == []

    def test_results_are_appended_in_order(self):
        """Test results come back in completion order per subject."""
        store = InMemoryResultStore()
        for i in range(3):
            store.record("42", make_result(task_id=f"t{i}"))
        store.record("7", make_result(task_id="other", subject_id="7"))

        assert [r.task_id for r in store.fetch("42")] == ["t0", "t1", "t2"]
        assert [r.task_id for r in store.fetch("7")] == ["other"]

    def test_history_limit_evicts_oldest(self):
        """Test only the newest history_limit results are kept."""
        store = InMemoryResultStore(history_limit=2)
        for i in range(4):
            store.record("42", make_result(task_id=f"t{i}"))

        assert [r.task_id for r in store.fetch("42")] == ["t2", "t3"]

    def test_ttl_drops_expired_results(self):
        """Test results older than the TTL are not returned."""
        store = InMemoryResultStore(ttl_seconds=60)
        store.record("42", make_result(task_id="old", age_seconds=120))
        store.record("42", make_result(task_id="new"))

        assert [r.task_id for r in store.fetch("42")] == ["new"]

    def test_idle_subjects_are_dropped_after_ttl(self):
        """Test subjects that stop reporting are removed on the next write."""
        store = InMemoryResultStore(ttl_seconds=1)
        for i in range(1000):
            subject = str(i)
            store.record(subject, make_result(subject_id=subject, age_seconds=5))

        store.record("fresh", make_result(subject_id="fresh"))

        assert store.subjects() == ["fresh"]
        assert len(store._results) == 1

    def test_subjects_excludes_expired_history(self):
        """Test subjects() does not list subjects whose results all expired."""
        store = InMemoryResultStore(ttl_seconds=60)
        store.record("42", make_result(age_seconds=10))
        store._results["42"][0].completed_at -= timedelta(seconds=120)

        assert store.subjects() == []

    def test_fetch_returns_a_copy(self):
        """Test callers cannot mutate stored history."""
        store = InMemoryResultStore()
        store.record("42", make_result())

        store.fetch("42").clear()

        assert len(store.fetch("42")) == 1

    def test_subjects_and_clear(self):
        """Test subjects lists keys with results and clear empties them."""
        store = InMemoryResultStore()
        store.record("42", make_result())
        store.record("7", make_result(subject_id="7"))

        assert sorted(store.subjects()) == ["42", "7"]

        store.clear()

        assert store.subjects() == []


class TestRedisResultStore:
    """Test RedisResultStore with a mocked Redis client."""

    def test_record_pushes_trims_and_expires(self):
        """Test record pipelines RPUSH, LTRIM and EXPIRE."""
        mock_redis = Mock()
        pipe = MagicMock()
        mock_redis.pipeline.return_value = pipe
        store = RedisResultStore(mock_redis, history_limit=10, ttl_seconds=3600)

        result = make_result()
        store.record("42", result)

        key, payload = pipe.rpush.call_args[0]
        assert key == "welltrack:results:42"
        assert json.loads(payload)["task_id"] == result.task_id
        pipe.ltrim.assert_called_once_with("welltrack:results:42", -10, -1)
        pipe.expire.assert_called_once_with("welltrack:results:42", 3600)
        pipe.execute.assert_called_once()

    def test_record_without_limits(self):
        """Test no trim or expiry is issued when limits are disabled."""
        mock_redis = Mock()
        pipe = MagicMock()
        mock_redis.pipeline.return_value = pipe
        store = RedisResultStore(mock_redis, history_limit=0, ttl_seconds=0)

        store.record("42", make_result())

        pipe.ltrim.assert_not_called()
        pipe.expire.assert_not_called()

    def test_fetch_decodes_results(self):
        """Test fetch rebuilds AnalysisResult objects in list order."""
        first, second = make_result(task_id="a"), make_result(task_id="b")
        mock_redis = Mock()
        mock_redis.lrange.return_value = [
            json.dumps(first.to_dict()),
            json.dumps(second.to_dict()),
        ]
        store = RedisResultStore(mock_redis)

        results = store.fetch("42")

        mock_redis.lrange.assert_called_once_with("welltrack:results:42", 0, -1)
        assert [r.task_id for r in results] == ["a", "b"]
        assert results[0].observation == first.observation

    def test_fetch_filters_expired(self):
        """Test fetch drops results older than the TTL."""
        mock_redis = Mock()
        mock_redis.lrange.return_value = [
            json.dumps(make_result(task_id="old", age_seconds=500).to_dict()),
            json.dumps(make_result(task_id="new").to_dict()),
        ]
        store = RedisResultStore(mock_redis, ttl_seconds=60)

        assert [r.task_id for r in store.fetch("42")] == ["new"]

    def test_subjects_strip_prefix(self):
        """Test subjects are derived from key names."""
        mock_redis = Mock()
        mock_redis.scan_iter.return_value = iter(
            ["welltrack:results:42", "welltrack:results:7"]
        )
        store = RedisResultStore(mock_redis)

        assert store.subjects() == ["42", "7"]
        mock_redis.scan_iter.assert_called_once_with(match="welltrack:results:*")


class TestBuildResultStore:
    """Test backend selection."""

    def test_memory_backend(self):
        """Test the default backend is in-memory with configured bounds."""
        settings = Settings(DATABASE_URL="sqlite://", RESULT_HISTORY_LIMIT=5, RESULT_TTL_SECONDS=10)

        store = build_result_store(settings)

        assert isinstance(store, InMemoryResultStore)
        assert store.history_limit == 5
        assert store.ttl_seconds == 10

    def test_redis_backend(self):
        """Test the redis backend wraps the given client."""
        settings = Settings(DATABASE_URL="sqlite://", RESULT_BACKEND="redis")
        mock_redis = Mock()

        store = build_result_store(settings, mock_redis)

        assert isinstance(store, RedisResultStore)
        assert store.redis is mock_redis

    def test_redis_backend_requires_client(self):
        """Test the redis backend refuses to start without a client."""
        settings = Settings(DATABASE_URL="sqlite://", RESULT_BACKEND="redis")

        with pytest.raises(ValueError):
            build_result_store(settings)
