"""Queue management API endpoints."""
from fastapi import APIRouter, Depends
from welltrack.api.deps import get_analysis_queue, get_worker
from welltrack.api.schemas.analysis import QueuePurged, QueueStats
from welltrack.api.schemas.response import ResponseCodes, StandardResponse
from welltrack.worker.analysis_queue import AnalysisQueue
from welltrack.worker.analysis_worker import AnalysisWorker


router = APIRouter(prefix="/queue", tags=["queue"])


@router.get("/stats", response_model=StandardResponse[QueueStats])
def get_queue_stats(
    queue: AnalysisQueue = Depends(get_analysis_queue),
    worker: AnalysisWorker = Depends(get_worker),
) -> StandardResponse[QueueStats]:
    """
    Get queue statistics.

    Returns:
        StandardResponse: Pending tasks and worker counters
    """
    return StandardResponse(
        data=QueueStats(
            pending_tasks=queue.get_queue_length(),
            max_depth=queue.max_depth,
            worker_running=worker.is_running,
            tasks_processed=worker.tasks_processed,
            tasks_succeeded=worker.tasks_succeeded,
            tasks_failed=worker.tasks_failed,
        ),
        code=ResponseCodes.QUEUE_STATS_RETRIEVED,
        httpStatus="OK",
        description="Queue statistics retrieved successfully",
    )


@router.post("/purge", response_model=StandardResponse[QueuePurged])
def purge_queue(
    queue: AnalysisQueue = Depends(get_analysis_queue),
) -> StandardResponse[QueuePurged]:
    """
    Purge all waiting tasks from the analysis queue.

    WARNING: This is a destructive operation; purged tasks produce no result.

    Returns:
        StandardResponse: Number of tasks discarded
    """
    purged = queue.purge()

    return StandardResponse(
        data=QueuePurged(purged_tasks=purged),
        code=ResponseCodes.QUEUE_PURGED,
        httpStatus="OK",
        description="Queue purged successfully",
    )
