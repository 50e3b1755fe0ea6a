"""Pydantic schemas for the analysis API."""
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
from welltrack.core.enums import EffectOperation
from welltrack.worker.models import AnalysisResult


class AnalysisAccepted(BaseModel):
    """Acknowledgement returned when an image is queued."""

    task_id: str
    subject_id: str
    queue_position: int = Field(..., ge=1, description="1-based position in the queue")


class ObservationSchema(BaseModel):
    """Signals interpreted from one inference response."""

    tired: bool
    drinking: bool
    bad_posture: bool
    digit_count: Optional[int] = None

    model_config = {"from_attributes": True}


class EffectOutcomeSchema(BaseModel):
    """Outcome of one side effect."""

    operation: EffectOperation
    succeeded: bool
    error: Optional[str] = None

    model_config = {"from_attributes": True}


class AnalysisResultSchema(BaseModel):
    """Result of processing one analysis task."""

    task_id: str
    subject_id: str
    message: str
    failed_operations: List[str]
    observation: Optional[ObservationSchema] = None
    outcomes: List[EffectOutcomeSchema]
    completed_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResultSchema":
        return cls.model_validate(result.to_dict())


class ResultHistory(BaseModel):
    """Accumulated results for a subject, oldest first."""

    subject_id: str
    count: int
    results: List[AnalysisResultSchema]


class CalibrationData(BaseModel):
    """Calibration values returned by the inference service."""

    calibration: Dict[str, Any]


class ActivityLogged(BaseModel):
    """Result of logging a rest activity."""

    subject_id: str
    metric: str
    challenges_advanced: int


class QueueStats(BaseModel):
    """Analysis queue and worker statistics."""

    pending_tasks: int
    max_depth: Optional[int]
    worker_running: bool
    tasks_processed: int
    tasks_succeeded: int
    tasks_failed: int


class QueuePurged(BaseModel):
    """Result of purging the analysis queue."""

    purged_tasks: int
