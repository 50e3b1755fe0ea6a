"""Test doubles and builders for the analysis pipeline."""
import asyncio
from typing import Any, Dict, List, Optional, Sequence, Union
from welltrack.core.exceptions import PersistenceError
from welltrack.worker.models import AnalysisTask, ObservationRaw

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg-body\xff\xd9"


def make_task(
    subject_id: str = "42",
    payload: bytes = JPEG_BYTES,
    content_type: str = "image/jpeg",
    file_name: str = "frame.jpg",
) -> AnalysisTask:
    """Build an analysis task with sensible defaults."""
    return AnalysisTask(
        subject_id=subject_id,
        payload=payload,
        content_type=content_type,
        file_name=file_name,
    )


class FakeInferenceClient:
    """
    Inference client returning scripted responses in order.

    Each scripted item is either a dict (decoded into ``ObservationRaw``)
    or an exception instance to raise. The last item repeats once the
    script runs out.
    """

    def __init__(
        self,
        responses: Sequence[Union[Dict[str, Any], Exception]] = ({},),
        calibration: Optional[Dict[str, Any]] = None,
        delay: float = 0.0,
    ):
        self.responses = list(responses)
        self.calibration = calibration or {"calibration_values": {"ear": 0.3}}
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    async def analyze(self, payload: bytes, content_type: str, file_name: str) -> ObservationRaw:
        self.calls.append(
            {"payload": payload, "content_type": content_type, "file_name": file_name}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return ObservationRaw.model_validate(response)

    async def calibrate(self, payload: bytes, content_type: str, file_name: str) -> Dict[str, Any]:
        self.calls.append(
            {"payload": payload, "content_type": content_type, "file_name": file_name}
        )
        return self.calibration


class RecordingPersistence:
    """
    Persistence double that records every call.

    ``fail_on`` holds operation keys that raise ``PersistenceError``:
    ``insert_observation``, ``increment_progress:<metric>`` and
    ``flag_challenges_started``.
    """

    def __init__(self, fail_on: Sequence[str] = ()):
        self.fail_on = set(fail_on)
        self.calls: List[tuple] = []

    async def insert_observation(self, subject_id, tired, drinking, bad_posture):
        self.calls.append(("insert_observation", subject_id, tired, drinking, bad_posture))
        self._maybe_fail("insert_observation")
        return len(self.calls)

    async def increment_progress(self, metric, subject_id):
        self.calls.append(("increment_progress", metric, subject_id))
        self._maybe_fail(f"increment_progress:{metric}")
        return 1

    async def flag_challenges_started(self, subject_id, digit_count):
        self.calls.append(("flag_challenges_started", subject_id, digit_count))
        self._maybe_fail("flag_challenges_started")
        return ["challenge"]

    def calls_named(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    def _maybe_fail(self, key: str) -> None:
        if key in self.fail_on:
            raise PersistenceError(f"{key} failed")


async def wait_for_results(result_store, subject_id: str, count: int, timeout: float = 2.0):
    """Poll a result store until ``count`` results exist for a subject."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        results = result_store.fetch(subject_id)
        if len(results) >= count:
            return results
        await asyncio.sleep(0.01)
    return result_store.fetch(subject_id)
