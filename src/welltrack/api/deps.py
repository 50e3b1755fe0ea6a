"""API dependencies for FastAPI."""
from typing import Generator, Optional
from fastapi import HTTPException, Request
from redis import Redis
from sqlalchemy.orm import Session
from welltrack.core.database import SessionLocal
from welltrack.worker.analysis_queue import AnalysisQueue
from welltrack.worker.analysis_worker import AnalysisWorker
from welltrack.worker.components import AnalysisComponents
from welltrack.worker.inference_client import InferenceClient
from welltrack.worker.pipeline import AnalysisPipeline


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_components(request: Request) -> AnalysisComponents:
    """
    Dependency to get the pipeline components built by the app lifespan.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    components = getattr(request.app.state, "components", None)
    if components is None:
        raise HTTPException(status_code=503, detail="Analysis pipeline not available")
    return components


def get_analysis_queue(request: Request) -> AnalysisQueue:
    """Dependency to get the analysis queue."""
    return get_components(request).queue


def get_result_store(request: Request):
    """Dependency to get the result store."""
    return get_components(request).result_store


def get_pipeline(request: Request) -> AnalysisPipeline:
    """Dependency to get the analysis pipeline."""
    return get_components(request).pipeline


def get_worker(request: Request) -> AnalysisWorker:
    """Dependency to get the analysis worker."""
    return get_components(request).worker


def get_inference_client(request: Request) -> InferenceClient:
    """Dependency to get the inference client."""
    return get_components(request).inference_client


def get_persistence(request: Request):
    """Dependency to get the persistence adapter."""
    return get_components(request).persistence


def get_redis_client(request: Request) -> Optional[Redis]:
    """
    Dependency to get the Redis client used by the result store.

    Returns:
        Optional[Redis]: Redis client, or None when results live in memory
    """
    return get_components(request).redis
