"""Core enumerations for the WellTrack analysis pipeline."""
from enum import Enum


class EffectOperation(str, Enum):
    """
    Side effects applied for every analysed image.

    Each one is attempted independently; a failure in one never skips
    the others.
    """

    PERSIST_OBSERVATION = "persist_observation"
    INCREMENT_FATIGUE = "increment_fatigue"
    INCREMENT_DRINK = "increment_drink"
    INCREMENT_BAD_POSTURE = "increment_bad_posture"
    FLAG_CHALLENGE_STARTED = "flag_challenge_started"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value


class ProgressMetric(str, Enum):
    """Progress counter names understood by the challenge store."""

    FATIGUE = "fatigue"
    DRINK = "drink"
    BAD_POSTURE = "bad_posture"
    REST = "rest"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value


class ImageContentType(str, Enum):
    """MIME types accepted for analysis uploads."""

    JPEG = "image/jpeg"
    PNG = "image/png"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value


class ResultBackend(str, Enum):
    """Result history storage backends."""

    MEMORY = "memory"
    REDIS = "redis"

    def __str__(self) -> str:
        """Return string representation of the enum value."""
        return self.value
