"""Image analysis API endpoints."""
import asyncio
import logging
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from welltrack.api.deps import get_analysis_queue, get_pipeline, get_result_store
from welltrack.api.schemas.analysis import (
    AnalysisAccepted,
    AnalysisResultSchema,
    ResultHistory,
)
from welltrack.api.schemas.response import ResponseCodes, StandardResponse, error_detail
from welltrack.core.exceptions import (
    QueueFullError,
    UnsupportedImageTypeError,
    ValidationError,
)
from welltrack.services.uploads import build_analysis_task
from welltrack.worker.analysis_queue import AnalysisQueue
from welltrack.worker.models import AnalysisTask
from welltrack.worker.pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyze", tags=["analysis"])


async def _read_task(subject_id: str, image: UploadFile) -> AnalysisTask:
    payload = await image.read()
    try:
        return build_analysis_task(subject_id, payload, image.content_type, image.filename)
    except UnsupportedImageTypeError as e:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=error_detail(
                ResponseCodes.UNSUPPORTED_IMAGE_TYPE, "UNSUPPORTED_MEDIA_TYPE", str(e)
            ),
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(ResponseCodes.INVALID_IMAGE, "BAD_REQUEST", str(e)),
        )


@router.post(
    "/{subject_id}",
    response_model=StandardResponse[AnalysisAccepted],
    status_code=status.HTTP_202_ACCEPTED,
)
async def enqueue_analysis(
    subject_id: str,
    image: UploadFile = File(...),
    queue: AnalysisQueue = Depends(get_analysis_queue),
) -> StandardResponse[AnalysisAccepted]:
    """
    Queue an image for asynchronous analysis.

    - Accepts JPEG or PNG images in the ``image`` form field
    - Returns as soon as the task is queued; poll the results endpoint
      to learn what happened
    """
    task = await _read_task(subject_id, image)

    try:
        position = queue.enqueue(task)
    except QueueFullError as e:
        logger.warning(f"Rejected analysis for subject {task.subject_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=error_detail(ResponseCodes.QUEUE_FULL, "SERVICE_UNAVAILABLE", str(e)),
        )

    return StandardResponse(
        data=AnalysisAccepted(
            task_id=task.task_id,
            subject_id=task.subject_id,
            queue_position=position,
        ),
        code=ResponseCodes.ANALYSIS_QUEUED,
        httpStatus="ACCEPTED",
        description="Image queued for analysis",
    )


@router.post(
    "/{subject_id}/sync",
    response_model=StandardResponse[AnalysisResultSchema],
)
async def analyze_now(
    subject_id: str,
    image: UploadFile = File(...),
    pipeline: AnalysisPipeline = Depends(get_pipeline),
    result_store=Depends(get_result_store),
) -> StandardResponse[AnalysisResultSchema]:
    """
    Analyze an image inline and return the result.

    Runs the same pipeline as the background worker, bypassing the queue.
    The result is also added to the subject's history.
    """
    task = await _read_task(subject_id, image)
    result = await pipeline.run(task)
    await asyncio.to_thread(result_store.record, task.subject_id, result)

    return StandardResponse(
        data=AnalysisResultSchema.from_result(result),
        code=ResponseCodes.ANALYSIS_COMPLETED,
        httpStatus="OK",
        description=result.message,
    )


@router.get("/{subject_id}/results", response_model=StandardResponse[ResultHistory])
async def get_results(
    subject_id: str,
    result_store=Depends(get_result_store),
) -> StandardResponse[ResultHistory]:
    """
    Get the analysis results recorded for a subject, oldest first.

    Returns an empty list when nothing has been processed yet.
    """
    results = await asyncio.to_thread(result_store.fetch, subject_id)

    return StandardResponse(
        data=ResultHistory(
            subject_id=subject_id,
            count=len(results),
            results=[AnalysisResultSchema.from_result(result) for result in results],
        ),
        code=ResponseCodes.ANALYSIS_RESULTS_RETRIEVED,
        httpStatus="OK",
        description="Analysis results retrieved successfully",
    )
