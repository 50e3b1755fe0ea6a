"""Activity API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from welltrack.api.deps import get_persistence
from welltrack.api.schemas.analysis import ActivityLogged
from welltrack.api.schemas.response import ResponseCodes, StandardResponse, error_detail
from welltrack.core.enums import ProgressMetric
from welltrack.core.exceptions import PersistenceError

router = APIRouter(prefix="/activity", tags=["activity"])


@router.post("/rest/{subject_id}", response_model=StandardResponse[ActivityLogged])
async def log_rest(
    subject_id: str,
    persistence=Depends(get_persistence),
) -> StandardResponse[ActivityLogged]:
    """
    Record a rest break for a subject.

    Advances every open ``rest`` challenge of the subject by one.
    Subject ids must be numeric.
    """
    if not subject_id.strip().isdigit():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_detail(
                ResponseCodes.INVALID_SUBJECT, "BAD_REQUEST", f"Invalid subject id: {subject_id!r}"
            ),
        )

    try:
        advanced = await persistence.increment_progress(ProgressMetric.REST.value, subject_id)
    except PersistenceError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error_detail(
                ResponseCodes.PERSISTENCE_ERROR, "INTERNAL_SERVER_ERROR", str(e)
            ),
        )

    return StandardResponse(
        data=ActivityLogged(
            subject_id=subject_id,
            metric=ProgressMetric.REST.value,
            challenges_advanced=advanced,
        ),
        code=ResponseCodes.ACTIVITY_LOGGED,
        httpStatus="OK",
        description="Activity logged successfully",
    )
