"""Inference service passthrough endpoints."""
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from welltrack.api.deps import get_inference_client
from welltrack.api.schemas.analysis import CalibrationData
from welltrack.api.schemas.response import ResponseCodes, StandardResponse, error_detail
from welltrack.core.exceptions import (
    TransportError,
    UnsupportedImageTypeError,
    ValidationError,
)
from welltrack.services.uploads import build_analysis_task
from welltrack.worker.inference_client import InferenceClient

router = APIRouter(prefix="/ml", tags=["ml"])


@router.post("/calibrate", response_model=StandardResponse[CalibrationData])
async def calibrate(
    image: UploadFile = File(...),
    client: InferenceClient = Depends(get_inference_client),
) -> StandardResponse[CalibrationData]:
    """
    Compute baseline posture and facial feature values from an image.

    The calibration body is returned as produced by the inference service.
    """
    payload = await image.read()
    try:
        # Calibration images are not tied to a subject
        task = build_analysis_task("calibration", payload, image.content_type, image.filename)
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

    try:
        calibration = await client.calibrate(task.payload, task.content_type, task.file_name)
    except TransportError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=error_detail(
                ResponseCodes.INFERENCE_UNAVAILABLE,
                "BAD_GATEWAY",
                f"Failed to fetch calibration data: {e}",
            ),
        )

    return StandardResponse(
        data=CalibrationData(calibration=calibration),
        code=ResponseCodes.CALIBRATION_RETRIEVED,
        httpStatus="OK",
        description="Calibration data retrieved successfully",
    )
