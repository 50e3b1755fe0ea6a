"""Background worker that drains the analysis queue one task at a time."""
import asyncio
import logging
import time
from typing import Optional
from welltrack.observability.metrics import record_task_processed, worker_running
from welltrack.worker.analysis_queue import AnalysisQueue
from welltrack.worker.models import AnalysisResult, AnalysisTask
from welltrack.worker.pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)


class AnalysisWorker:
    """
    Single consumer for the analysis queue.

    Pops the head task, runs it through the pipeline to completion and
    records the result before looking at the next task. Exactly one task
    is in flight at a time, which keeps progress-counter updates for a
    subject from racing each other. When the queue is empty the worker
    idles for ``poll_interval`` seconds.

    A failure while processing a task becomes that task's result; it
    never stops the loop.
    """

    def __init__(
        self,
        queue: AnalysisQueue,
        pipeline: AnalysisPipeline,
        result_store,
        poll_interval: float = 0.5,
        worker_id: str = "analysis-worker",
    ):
        """
        Initialize analysis worker.

        Args:
            queue: Queue to drain
            pipeline: Per-task analysis pipeline
            result_store: Store receiving one result per task
            poll_interval: Idle time in seconds when the queue is empty
            worker_id: Name used in log messages
        """
        self.queue = queue
        self.pipeline = pipeline
        self.result_store = result_store
        self.poll_interval = poll_interval
        self.worker_id = worker_id

        # State
        self.is_running = False
        self._stop_event = asyncio.Event()
        self._drain_on_stop = False
        self._loop_task: Optional[asyncio.Task] = None

        # Metrics
        self.tasks_processed = 0
        self.tasks_succeeded = 0
        self.tasks_failed = 0

    async def start(self):
        """
        Start the worker polling loop.

        Runs until ``stop`` is called or the task is cancelled.
        """
        self.is_running = True
        self._loop_task = asyncio.current_task()
        worker_running.set(1)
        logger.info(f"Worker {self.worker_id} starting...")

        try:
            stopped_cleanly = await self._poll_loop()
            if stopped_cleanly and self._drain_on_stop:
                await self._drain()
        finally:
            self.is_running = False
            worker_running.set(0)
            logger.info(f"Worker {self.worker_id} stopped")

    async def stop(self, timeout: float = 30.0, drain: bool = False):
        """
        Stop the worker gracefully.

        Args:
            timeout: Maximum time to wait for the loop to finish
            drain: Process every task still queued before stopping
        """
        logger.info(f"Worker {self.worker_id} stopping...")
        self._drain_on_stop = drain
        self._stop_event.set()

        loop_task = self._loop_task
        if loop_task is None or loop_task.done() or loop_task is asyncio.current_task():
            return

        try:
            await asyncio.wait_for(asyncio.shield(loop_task), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Worker {self.worker_id} did not stop in time, cancelling "
                f"({self.queue.get_queue_length()} tasks left in queue)"
            )
            loop_task.cancel()

    async def process_task(self, task: AnalysisTask) -> AnalysisResult:
        """
        Process one task and record its result.

        Args:
            task: Task to process

        Returns:
            AnalysisResult: Result recorded for the task
        """
        started = time.perf_counter()
        logger.info(f"Processing analysis task {task.task_id} for subject {task.subject_id}")

        try:
            result = await self.pipeline.run(task)
        except Exception as e:
            logger.error(f"Unexpected error processing task {task.task_id}: {e}", exc_info=True)
            result = self.pipeline.failure_result(task, f"Unexpected error: {e}")

        self.tasks_processed += 1
        if result.succeeded:
            self.tasks_succeeded += 1
            logger.info(f"Analysis completed for subject {task.subject_id}")
        else:
            self.tasks_failed += 1
            logger.warning(
                f"Analysis for subject {task.subject_id} had failed operations: "
                f"{', '.join(result.failed_operations)}"
            )

        try:
            await asyncio.to_thread(self.result_store.record, task.subject_id, result)
        except Exception as e:
            logger.error(f"Error recording result for task {task.task_id}: {e}", exc_info=True)

        record_task_processed(
            "success" if result.succeeded else "failed",
            time.perf_counter() - started,
        )
        return result

    async def _poll_loop(self) -> bool:
        """
        Main polling loop.

        Processes queued tasks in arrival order until stopped.

        Returns:
            bool: False if the loop was cancelled, True if it was stopped
        """
        while not self._stop_event.is_set():
            try:
                task = self.queue.dequeue()

                if task:
                    await self.process_task(task)
                else:
                    await self._idle()

            except asyncio.CancelledError:
                return False
            except Exception as e:
                logger.error(f"Error in poll loop: {e}", exc_info=True)
                await self._idle()

        return True

    async def _idle(self):
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval)
        except asyncio.TimeoutError:
            pass  # Normal timeout, poll again

    async def _drain(self):
        remaining = self.queue.get_queue_length()
        if remaining:
            logger.info(f"Draining {remaining} queued analysis tasks before shutdown")
        while True:
            task = self.queue.dequeue()
            if task is None:
                break
            await self.process_task(task)
