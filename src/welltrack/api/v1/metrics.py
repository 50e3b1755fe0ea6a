"""Prometheus metrics endpoint."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from welltrack.api.deps import get_analysis_queue
from welltrack.observability.metrics import update_queue_metrics
from welltrack.worker.analysis_queue import AnalysisQueue

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_class=PlainTextResponse)
def get_metrics(queue: AnalysisQueue = Depends(get_analysis_queue)):
    """Expose the default registry in Prometheus text format."""
    # The queue gauge is refreshed here as well as on every enqueue/dequeue
    update_queue_metrics(len(queue))

    return PlainTextResponse(
        content=generate_latest().decode("utf-8"),
        media_type=CONTENT_TYPE_LATEST,
    )
