"""Worker data models and result classes."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4
from pydantic import BaseModel, ConfigDict
from welltrack.core.enums import EffectOperation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AnalysisTask:
    """
    An uploaded image waiting for analysis.

    Immutable once created; the queue owns it until the worker pops it.
    """

    subject_id: str
    payload: bytes = field(repr=False)
    content_type: str
    file_name: str
    task_id: str = field(default_factory=lambda: str(uuid4()))
    enqueued_at: datetime = field(default_factory=_utcnow)


class ObservationRaw(BaseModel):
    """
    Fields consumed from the inference service response.

    Every field is optional; unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    ear_deviated: Optional[bool] = None
    mar_deviated: Optional[bool] = None
    drinking: Optional[bool] = None
    shoulder_angle_deviated: Optional[bool] = None
    neck_straight_deviated: Optional[bool] = None
    finger_count: Optional[float] = None


@dataclass(frozen=True)
class Observation:
    """Signals derived from one inference response."""

    tired: bool = False
    drinking: bool = False
    bad_posture: bool = False
    digit_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tired": self.tired,
            "drinking": self.drinking,
            "bad_posture": self.bad_posture,
            "digit_count": self.digit_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Observation":
        return cls(
            tired=data.get("tired", False),
            drinking=data.get("drinking", False),
            bad_posture=data.get("bad_posture", False),
            digit_count=data.get("digit_count"),
        )


@dataclass(frozen=True)
class EffectOutcome:
    """Whether one side effect of a task succeeded."""

    operation: EffectOperation
    succeeded: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": self.operation.value,
            "succeeded": self.succeeded,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EffectOutcome":
        return cls(
            operation=EffectOperation(data["operation"]),
            succeeded=data["succeeded"],
            error=data.get("error"),
        )


@dataclass
class AnalysisResult:
    """
    Result of processing one analysis task.

    ``observation`` is None when inference never produced one.
    """

    task_id: str
    subject_id: str
    message: str
    failed_operations: List[str] = field(default_factory=list)
    observation: Optional[Observation] = None
    outcomes: List[EffectOutcome] = field(default_factory=list)
    completed_at: datetime = field(default_factory=_utcnow)

    @property
    def succeeded(self) -> bool:
        return self.observation is not None and not self.failed_operations

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible primitives."""
        return {
            "task_id": self.task_id,
            "subject_id": self.subject_id,
            "message": self.message,
            "failed_operations": list(self.failed_operations),
            "observation": self.observation.to_dict() if self.observation else None,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
            "completed_at": self.completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Rebuild a result serialized with ``to_dict``."""
        observation = data.get("observation")
        return cls(
            task_id=data["task_id"],
            subject_id=data["subject_id"],
            message=data["message"],
            failed_operations=list(data.get("failed_operations", [])),
            observation=Observation.from_dict(observation) if observation else None,
            outcomes=[EffectOutcome.from_dict(item) for item in data.get("outcomes", [])],
            completed_at=datetime.fromisoformat(data["completed_at"]),
        )
