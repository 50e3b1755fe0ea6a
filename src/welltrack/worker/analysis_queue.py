"""In-process FIFO queue of pending analysis tasks."""
import threading
from collections import deque
from typing import Deque, List, Optional
from welltrack.core.exceptions import QueueFullError
from welltrack.observability.metrics import (
    record_queue_dequeue,
    record_queue_enqueue,
    record_queue_rejected,
    update_queue_metrics,
)
from welltrack.worker.models import AnalysisTask


class AnalysisQueue:
    """
    Bounded FIFO queue shared by request handlers and the analysis worker.

    Producers may call ``enqueue`` from the event loop or from threadpool
    handlers; a lock guards the deque. ``enqueue`` never blocks: once
    ``max_depth`` tasks are waiting it raises ``QueueFullError``.
    """

    def __init__(self, max_depth: Optional[int] = None):
        """
        Initialize queue.

        Args:
            max_depth: Maximum number of waiting tasks (None or 0 = unbounded)
        """
        self.max_depth = max_depth or None
        self._tasks: Deque[AnalysisTask] = deque()
        self._lock = threading.Lock()

    def enqueue(self, task: AnalysisTask) -> int:
        """
        Append a task to the tail of the queue.

        Args:
            task: Task to enqueue

        Returns:
            int: 1-based position of the task in the queue

        Raises:
            QueueFullError: If the queue already holds ``max_depth`` tasks
        """
        with self._lock:
            if self.max_depth is not None and len(self._tasks) >= self.max_depth:
                record_queue_rejected()
                raise QueueFullError(self.max_depth)
            self._tasks.append(task)
            position = len(self._tasks)
        record_queue_enqueue(position)
        return position

    def dequeue(self) -> Optional[AnalysisTask]:
        """
        Remove and return the head task.

        Returns:
            Optional[AnalysisTask]: Head task, or None if the queue is empty
        """
        with self._lock:
            if not self._tasks:
                return None
            task = self._tasks.popleft()
            pending = len(self._tasks)
        record_queue_dequeue(pending)
        return task

    def peek(self) -> Optional[AnalysisTask]:
        """
        View the head task without removing it.

        Returns:
            Optional[AnalysisTask]: Head task, or None if the queue is empty
        """
        with self._lock:
            return self._tasks[0] if self._tasks else None

    def get_queue_length(self) -> int:
        """
        Get number of tasks in queue.

        Returns:
            int: Number of waiting tasks
        """
        with self._lock:
            return len(self._tasks)

    def __len__(self) -> int:
        return self.get_queue_length()

    def drain(self) -> List[AnalysisTask]:
        """
        Remove and return every waiting task in FIFO order.

        Returns:
            List[AnalysisTask]: Tasks that were waiting
        """
        with self._lock:
            tasks = list(self._tasks)
            self._tasks.clear()
        update_queue_metrics(0)
        return tasks

    def purge(self) -> int:
        """
        Delete all waiting tasks.

        Returns:
            int: Number of tasks discarded
        """
        return len(self.drain())
