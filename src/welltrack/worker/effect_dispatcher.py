"""Effect dispatcher: applies the side effects of one observation."""
import logging
from typing import Awaitable, Callable, List, Optional
from welltrack.core.enums import EffectOperation, ProgressMetric
from welltrack.observability.metrics import record_effect_failure
from welltrack.worker.models import EffectOutcome, Observation

logger = logging.getLogger(__name__)

# Operations whose outcome depends on a successful inference call
DISPATCH_OPERATIONS = (
    EffectOperation.PERSIST_OBSERVATION,
    EffectOperation.INCREMENT_FATIGUE,
    EffectOperation.INCREMENT_DRINK,
    EffectOperation.INCREMENT_BAD_POSTURE,
    EffectOperation.FLAG_CHALLENGE_STARTED,
)


class EffectDispatcher:
    """
    Issues persistence operations for an interpreted observation.

    Steps run in a fixed order and independently of each other:

    1. persist the observation row
    2. increment ``fatigue``, ``drink`` and ``bad_posture`` counters for
       each signal that is set
    3. flag finger-triggered challenges as started when a digit count
       was detected

    ``apply`` never raises; every step is reported as an ``EffectOutcome``.
    """

    def __init__(self, persistence):
        """
        Initialize dispatcher.

        Args:
            persistence: Object exposing ``insert_observation``,
                ``increment_progress`` and ``flag_challenges_started``
                coroutines
        """
        self.persistence = persistence

    async def apply(self, subject_id: str, observation: Observation) -> List[EffectOutcome]:
        """
        Apply all side effects for an observation.

        Args:
            subject_id: Subject the observation belongs to
            observation: Interpreted signals

        Returns:
            List[EffectOutcome]: One outcome per attempted operation
        """
        outcomes = [
            await self._attempt(
                EffectOperation.PERSIST_OBSERVATION,
                subject_id,
                lambda: self.persistence.insert_observation(
                    subject_id,
                    tired=observation.tired,
                    drinking=observation.drinking,
                    bad_posture=observation.bad_posture,
                ),
            )
        ]

        increments = (
            (observation.tired, EffectOperation.INCREMENT_FATIGUE, ProgressMetric.FATIGUE),
            (observation.drinking, EffectOperation.INCREMENT_DRINK, ProgressMetric.DRINK),
            (observation.bad_posture, EffectOperation.INCREMENT_BAD_POSTURE, ProgressMetric.BAD_POSTURE),
        )
        for signal, operation, metric in increments:
            if signal:
                outcomes.append(
                    await self._attempt(
                        operation,
                        subject_id,
                        lambda metric=metric: self.persistence.increment_progress(
                            metric.value, subject_id
                        ),
                    )
                )

        if observation.digit_count:
            outcomes.append(
                await self._attempt(
                    EffectOperation.FLAG_CHALLENGE_STARTED,
                    subject_id,
                    lambda: self.persistence.flag_challenges_started(
                        subject_id, observation.digit_count
                    ),
                )
            )

        return outcomes

    @staticmethod
    def failed_outcomes(error: Optional[str] = None) -> List[EffectOutcome]:
        """
        Outcomes for a task whose observation never arrived.

        Args:
            error: Reason shared by every operation

        Returns:
            List[EffectOutcome]: Every dispatch operation marked failed
        """
        return [
            EffectOutcome(operation=operation, succeeded=False, error=error)
            for operation in DISPATCH_OPERATIONS
        ]

    async def _attempt(
        self,
        operation: EffectOperation,
        subject_id: str,
        call: Callable[[], Awaitable[object]],
    ) -> EffectOutcome:
        try:
            await call()
        except Exception as e:
            logger.warning(
                f"{operation.value} failed for subject {subject_id}: {e}",
                exc_info=True,
            )
            record_effect_failure(operation.value)
            return EffectOutcome(operation=operation, succeeded=False, error=str(e))
        return EffectOutcome(operation=operation, succeeded=True)
