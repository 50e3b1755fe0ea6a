"""Map raw inference fields to the signals the pipeline acts on."""
import math
from typing import Optional
from welltrack.worker.models import Observation, ObservationRaw


def _digit_count(finger_count: Optional[float]) -> Optional[int]:
    if finger_count is None or not math.isfinite(finger_count):
        return None
    return int(finger_count)


def interpret_observation(raw: ObservationRaw) -> Observation:
    """
    Derive fatigue, drinking, posture and digit-count signals.

    Absent fields count as False; ``finger_count`` is truncated to an int
    and stays None when missing.

    Args:
        raw: Decoded inference response

    Returns:
        Observation: Interpreted signals
    """
    return Observation(
        tired=bool(raw.ear_deviated or raw.mar_deviated),
        drinking=bool(raw.drinking),
        bad_posture=bool(raw.shoulder_angle_deviated or raw.neck_straight_deviated),
        digit_count=_digit_count(raw.finger_count),
    )
