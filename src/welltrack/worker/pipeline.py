"""Per-task analysis pipeline shared by the worker and the sync endpoint."""
import asyncio
import logging
from welltrack.core.exceptions import TransportError
from welltrack.worker.effect_dispatcher import EffectDispatcher
from welltrack.worker.inference_client import InferenceClient
from welltrack.worker.interpreter import interpret_observation
from welltrack.worker.models import AnalysisResult, AnalysisTask

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """
    Runs one task through inference, interpretation and side effects.

    Transport failures are folded into the result instead of raised;
    the caller always gets exactly one ``AnalysisResult``.

    Runs are serialized on one lock, so a task submitted through the sync
    endpoint waits for the worker's current task (and vice versa). Progress
    increments for a subject therefore never interleave.
    """

    def __init__(self, inference_client: InferenceClient, dispatcher: EffectDispatcher):
        """
        Initialize pipeline.

        Args:
            inference_client: Client for the inference service
            dispatcher: Side-effect dispatcher
        """
        self.inference_client = inference_client
        self.dispatcher = dispatcher
        self._lock = asyncio.Lock()

    async def run(self, task: AnalysisTask) -> AnalysisResult:
        """
        Process an analysis task to completion.

        Args:
            task: Task to process

        Returns:
            AnalysisResult: What happened, including failed operations
        """
        async with self._lock:
            return await self._run(task)

    async def _run(self, task: AnalysisTask) -> AnalysisResult:
        try:
            raw = await self.inference_client.analyze(
                task.payload, task.content_type, task.file_name
            )
        except TransportError as e:
            logger.error(f"Inference failed for task {task.task_id}: {e}")
            return self.failure_result(task, f"Inference failed: {e}")

        observation = interpret_observation(raw)
        outcomes = await self.dispatcher.apply(task.subject_id, observation)
        failed = [outcome.operation.value for outcome in outcomes if not outcome.succeeded]

        if failed:
            message = f"Analysis completed with {len(failed)} failed operation(s)"
        else:
            message = "Analysis completed"

        return AnalysisResult(
            task_id=task.task_id,
            subject_id=task.subject_id,
            message=message,
            failed_operations=failed,
            observation=observation,
            outcomes=outcomes,
        )

    def failure_result(self, task: AnalysisTask, message: str) -> AnalysisResult:
        """
        Build the result for a task that never reached the dispatcher.

        Args:
            task: Task that failed
            message: Failure description

        Returns:
            AnalysisResult: Result with every dispatch operation failed
        """
        outcomes = self.dispatcher.failed_outcomes(message)
        return AnalysisResult(
            task_id=task.task_id,
            subject_id=task.subject_id,
            message=message,
            failed_operations=[outcome.operation.value for outcome in outcomes],
            observation=None,
            outcomes=outcomes,
        )
