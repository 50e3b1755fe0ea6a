"""Construction of the analysis pipeline components."""
from dataclasses import dataclass
from typing import Callable, Optional
from redis import Redis
from sqlalchemy.orm import Session
from welltrack.config import Settings
from welltrack.core.enums import ResultBackend
from welltrack.services.persistence import SqlPersistence
from welltrack.services.result_store import build_result_store
from welltrack.worker.analysis_queue import AnalysisQueue
from welltrack.worker.analysis_worker import AnalysisWorker
from welltrack.worker.effect_dispatcher import EffectDispatcher
from welltrack.worker.inference_client import InferenceClient
from welltrack.worker.pipeline import AnalysisPipeline


@dataclass
class AnalysisComponents:
    """Explicitly constructed pipeline components owned by the app."""

    queue: AnalysisQueue
    result_store: object
    inference_client: InferenceClient
    persistence: object
    dispatcher: EffectDispatcher
    pipeline: AnalysisPipeline
    worker: AnalysisWorker
    redis: Optional[Redis] = None


def build_components(
    settings: Settings,
    session_factory: Callable[[], Session],
    redis: Optional[Redis] = None,
    inference_client: Optional[InferenceClient] = None,
    persistence=None,
    result_store=None,
) -> AnalysisComponents:
    """
    Wire queue, pipeline, result store and worker from settings.

    Any collaborator passed in explicitly replaces the default one.

    Args:
        settings: Application settings
        session_factory: Factory for SQLAlchemy sessions
        redis: Redis client (only used by the redis result backend)
        inference_client: Inference client override
        persistence: Persistence adapter override
        result_store: Result store override

    Returns:
        AnalysisComponents: Ready-to-start components
    """
    if redis is None and result_store is None and settings.RESULT_BACKEND == ResultBackend.REDIS.value:
        from welltrack.core.redis import get_redis

        redis = get_redis()

    queue = AnalysisQueue(max_depth=settings.ANALYSIS_QUEUE_MAX_DEPTH)
    inference_client = inference_client or InferenceClient(
        settings.ML_BASE_URL,
        timeout_seconds=settings.INFERENCE_TIMEOUT_SECONDS,
    )
    persistence = persistence or SqlPersistence(session_factory)
    result_store = result_store or build_result_store(settings, redis)
    dispatcher = EffectDispatcher(persistence)
    pipeline = AnalysisPipeline(inference_client, dispatcher)
    worker = AnalysisWorker(
        queue,
        pipeline,
        result_store,
        poll_interval=settings.ANALYSIS_POLL_INTERVAL,
    )

    return AnalysisComponents(
        queue=queue,
        result_store=result_store,
        inference_client=inference_client,
        persistence=persistence,
        dispatcher=dispatcher,
        pipeline=pipeline,
        worker=worker,
        redis=redis,
    )
