"""Standard API response schemas."""
from typing import Any, Optional, Generic, TypeVar
from pydantic import BaseModel, Field

T = TypeVar('T')


class StandardResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T = Field(..., description="Response data")
    code: str = Field(..., description="Response code")
    httpStatus: str = Field(..., description="HTTP status text")
    description: str = Field(..., description="Response description")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """Standard error response."""

    data: Optional[Any] = Field(None, description="Error details")
    code: str = Field(..., description="Error code")
    httpStatus: str = Field(..., description="HTTP status text")
    description: str = Field(..., description="Error description")

    model_config = {"from_attributes": True}


def error_detail(code: str, http_status: str, description: str) -> dict:
    """Build an ``HTTPException`` detail shaped like ``ErrorResponse``."""
    return ErrorResponse(
        data=None,
        code=code,
        httpStatus=http_status,
        description=description,
    ).model_dump()


# Response codes
class ResponseCodes:
    """Standard response codes."""

    # Success codes (2xx)
    ANALYSIS_QUEUED = "ANALYSIS_0001"
    ANALYSIS_RESULTS_RETRIEVED = "ANALYSIS_0002"
    ANALYSIS_COMPLETED = "ANALYSIS_0003"

    CALIBRATION_RETRIEVED = "ML_0001"

    ACTIVITY_LOGGED = "ACTIVITY_0001"

    QUEUE_STATS_RETRIEVED = "QUEUE_0001"
    QUEUE_PURGED = "QUEUE_0002"

    HEALTH_OK = "HEALTH_0001"

    # Error codes (4xx, 5xx)
    INVALID_IMAGE = "ANALYSIS_4001"
    UNSUPPORTED_IMAGE_TYPE = "ANALYSIS_4002"
    INVALID_SUBJECT = "ACTIVITY_4001"
    QUEUE_FULL = "QUEUE_5031"
    INFERENCE_UNAVAILABLE = "ML_5021"
    PERSISTENCE_ERROR = "DB_5001"
