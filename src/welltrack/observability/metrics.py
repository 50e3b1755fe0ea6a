"""Prometheus metrics for WellTrack."""
from prometheus_client import Counter, Gauge, Histogram, Info


# Queue metrics
queue_length = Gauge(
    'welltrack_analysis_queue_length',
    'Number of analysis tasks waiting in the queue'
)

queue_enqueued_total = Counter(
    'welltrack_analysis_queue_enqueued_total',
    'Total number of analysis tasks enqueued'
)

queue_dequeued_total = Counter(
    'welltrack_analysis_queue_dequeued_total',
    'Total number of analysis tasks dequeued'
)

queue_rejected_total = Counter(
    'welltrack_analysis_queue_rejected_total',
    'Total number of analysis tasks rejected because the queue was full'
)

# Task metrics
tasks_processed_total = Counter(
    'welltrack_analysis_tasks_processed_total',
    'Total number of analysis tasks processed',
    ['status']
)

effect_failures_total = Counter(
    'welltrack_effect_failures_total',
    'Total number of failed side effects',
    ['operation']
)

task_duration_seconds = Histogram(
    'welltrack_analysis_task_duration_seconds',
    'Time spent processing one analysis task',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# Inference metrics
inference_duration_seconds = Histogram(
    'welltrack_inference_duration_seconds',
    'Inference service call duration in seconds',
    ['endpoint', 'status'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0]
)

# Worker metrics
worker_running = Gauge(
    'welltrack_analysis_worker_running',
    'Whether the analysis worker loop is running'
)

# System info
system_info = Info(
    'welltrack_system',
    'WellTrack system information'
)


def update_queue_metrics(pending: int) -> None:
    """
    Update queue gauge metrics.

    Args:
        pending: Number of tasks waiting in the queue
    """
    queue_length.set(pending)


def record_queue_enqueue(pending: int) -> None:
    """Record task enqueued to the analysis queue."""
    queue_enqueued_total.inc()
    queue_length.set(pending)


def record_queue_dequeue(pending: int) -> None:
    """Record task dequeued from the analysis queue."""
    queue_dequeued_total.inc()
    queue_length.set(pending)


def record_queue_rejected() -> None:
    """Record task rejected by a full queue."""
    queue_rejected_total.inc()


def record_task_processed(status: str, duration: float) -> None:
    """Record a processed task and how long it took."""
    tasks_processed_total.labels(status=status).inc()
    task_duration_seconds.observe(duration)


def record_effect_failure(operation: str) -> None:
    """Record a failed side effect."""
    effect_failures_total.labels(operation=operation).inc()


def record_inference_call(endpoint: str, status: str, duration: float) -> None:
    """Record an inference service call."""
    inference_duration_seconds.labels(endpoint=endpoint, status=status).observe(duration)


def init_system_info(version: str) -> None:
    """
    Initialize system information metric.

    Args:
        version: Application version
    """
    system_info.info({
        'version': version,
        'name': 'WellTrack'
    })
