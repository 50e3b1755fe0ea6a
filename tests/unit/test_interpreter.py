"""Unit tests for the observation interpreter."""
import pytest
from welltrack.worker.interpreter import interpret_observation
from welltrack.worker.models import Observation, ObservationRaw


class TestInterpretObservation:
    """Test mapping of raw inference fields to signals."""

    def test_eye_deviation_means_tired(self):
        """Test ear_deviated alone marks the subject tired."""
        raw = ObservationRaw(ear_deviated=True, finger_count=3)

        observation = interpret_observation(raw)

        assert observation == Observation(
            tired=True, drinking=False, bad_posture=False, digit_count=3
        )

    def test_mouth_deviation_means_tired(self):
        """Test mar_deviated alone marks the subject tired."""
        observation = interpret_observation(ObservationRaw(mar_deviated=True))

        assert observation.tired is True

    @pytest.mark.parametrize(
        "fields",
        [
            {"shoulder_angle_deviated": True},
            {"neck_straight_deviated": True},
            {"shoulder_angle_deviated": True, "neck_straight_deviated": True},
        ],
    )
    def test_posture_signals(self, fields):
        """Test either posture deviation marks bad posture."""
        observation = interpret_observation(ObservationRaw(**fields))

        assert observation.bad_posture is True
        assert observation.tired is False

    def test_drinking_is_passed_through(self):
        """Test drinking maps directly."""
        observation = interpret_observation(ObservationRaw(drinking=True))

        assert observation.drinking is True

    def test_empty_response_defaults_to_no_signals(self):
        """Test absent fields become False and no digit count."""
        observation = interpret_observation(ObservationRaw())

        assert observation == Observation()
        assert observation.digit_count is None

    def test_zero_finger_count_is_kept_as_zero(self):
        """Test a zero count stays zero (and is falsy)."""
        observation = interpret_observation(ObservationRaw(finger_count=0))

        assert observation.digit_count == 0

    def test_fractional_finger_count_is_truncated(self):
        """Test numeric finger counts are truncated to int."""
        observation = interpret_observation(ObservationRaw(finger_count=2.0))

        assert observation.digit_count == 2
        assert isinstance(observation.digit_count, int)

    def test_unknown_fields_are_ignored(self):
        """Test extra response fields do not break decoding."""
        raw = ObservationRaw.model_validate({"drinking": True, "confidence": 0.91})

        assert interpret_observation(raw).drinking is True
