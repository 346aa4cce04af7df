"""In-process work queue for one-shot background jobs.

Jobs are delivered at most once and have no return channel: a job that raises
is logged and dropped. Jobs sharing a key run one at a time in enqueue order;
jobs with different keys run concurrently across the worker pool. Only idle
keys are put on the ready queue, so a backlog on one key holds at most one
worker.
"""

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from backend.app.utils.metrics import PrometheusLifecycleMetrics

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Job:
    """Unit of background work."""

    kind: str
    key: str
    run: Callable[[], Awaitable[None]]


class JobQueue:
    """Per-key FIFO backlogs dispatched to a fixed pool of worker tasks."""

    def __init__(self, concurrency: int = 4) -> None:
        """Initialize job queue.

        Args:
            concurrency: Number of worker tasks
        """
        self._concurrency = max(1, concurrency)
        # Ready keys; a key is on this queue or being run, never both
        self._queue: asyncio.Queue[str] = asyncio.Queue()
        self._pending: dict[str, deque[Job]] = {}
        self._workers: list[asyncio.Task[None]] = []
        self._metrics = PrometheusLifecycleMetrics()

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def enqueue(self, job: Job) -> None:
        """Schedule a job; returns immediately."""
        backlog = self._pending.get(job.key)
        if backlog is None:
            self._pending[job.key] = deque([job])
            self._queue.put_nowait(job.key)
        else:
            backlog.append(job)
        logger.debug(f"Enqueued {job.kind} job for {job.key}")

    async def start(self) -> None:
        """Start worker tasks on the running loop."""
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(), name=f"job-worker-{i}")
            for i in range(self._concurrency)
        ]
        logger.info(f"Job queue started with {self._concurrency} workers")

    async def join(self) -> None:
        """Wait until every enqueued job has finished."""
        await self._queue.join()

    async def stop(self, drain_timeout: float | None = 10.0) -> None:
        """Drain pending jobs (bounded by drain_timeout), then stop workers."""
        if not self._workers:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Job queue did not drain within {drain_timeout}s, cancelling workers")

        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    async def _worker(self) -> None:
        while True:
            key = await self._queue.get()
            try:
                await self._run(self._pending[key].popleft())
            finally:
                # Requeue before task_done so join() never sees a gap
                if self._pending[key]:
                    self._queue.put_nowait(key)
                else:
                    del self._pending[key]
                self._queue.task_done()

    async def _run(self, job: Job) -> None:
        try:
            await job.run()
            self._metrics.inc_job(job.kind, "ok")
        except Exception:
            logger.exception(f"Background {job.kind} job for {job.key} failed")
            self._metrics.inc_job(job.kind, "error")
