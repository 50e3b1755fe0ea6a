"""Health check API endpoint."""
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from redis import Redis
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from welltrack.api.deps import get_analysis_queue, get_db, get_redis_client, get_worker
from welltrack.api.schemas.response import StandardResponse, ResponseCodes
from welltrack.core.redis import redis_status
from welltrack.worker.analysis_queue import AnalysisQueue
from welltrack.worker.analysis_worker import AnalysisWorker

router = APIRouter()


class WorkerStats(BaseModel):
    """Analysis worker statistics."""

    running: bool
    pending_tasks: int
    tasks_processed: int


class HealthData(BaseModel):
    """Health check data model."""

    status: str
    database: str
    redis: str
    worker: Optional[WorkerStats] = None


@router.get("/health", response_model=StandardResponse[HealthData])
async def health_check(
    db: Session = Depends(get_db),
    redis: Optional[Redis] = Depends(get_redis_client),
    queue: AnalysisQueue = Depends(get_analysis_queue),
    worker: AnalysisWorker = Depends(get_worker),
) -> StandardResponse[HealthData]:
    """
    Report database, Redis and analysis worker state.

    The service is unhealthy when the database is unreachable or a
    configured Redis does not answer.
    """
    # Check database connection
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError:
        db_status = "disconnected"

    # Redis is only used when results are stored there
    redis_state = redis_status(redis)

    worker_stats = WorkerStats(
        running=worker.is_running,
        pending_tasks=queue.get_queue_length(),
        tasks_processed=worker.tasks_processed,
    )

    overall_status = "healthy"
    if db_status != "connected" or redis_state == "disconnected":
        overall_status = "unhealthy"

    health_data = HealthData(
        status=overall_status,
        database=db_status,
        redis=redis_state,
        worker=worker_stats,
    )

    return StandardResponse(
        data=health_data,
        code=ResponseCodes.HEALTH_OK,
        httpStatus="OK",
        description="Health check completed successfully",
    )
