"""Fixed-size pool of parse workers fed through bounded queues."""

from __future__ import annotations

import queue
import threading
from typing import Optional

from ..exceptions import PoolNotRunningError, QueueFullError
from ..logging_config import get_logger
from .models import AnalysisJob, JobResult

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.05


class WorkerPool:
    """Parses jobs concurrently on a fixed set of threads.

    Lifecycle is stopped -> running -> stopped; ``start`` and ``stop`` are
    idempotent. Workers check the stop signal between jobs, so a parse that
    is in flight always completes before its worker exits.

    Args:
        max_workers: Number of worker threads (at least 1)
        queue_factor: Job and result queue capacity as a multiple of workers
        poll_interval: How often idle workers re-check the stop signal
    """

    def __init__(
        self,
        max_workers: int,
        queue_factor: int = 2,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.max_workers = max(1, max_workers)
        self.capacity = self.max_workers * max(1, queue_factor)
        self.poll_interval = poll_interval

        self._jobs: queue.Queue[AnalysisJob] = queue.Queue(maxsize=self.capacity)
        self._results: queue.Queue[JobResult] = queue.Queue(maxsize=self.capacity)
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._threads: list[threading.Thread] = []
        self._running = False

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def start(self) -> None:
        """Spin up the workers. No-op while already running."""
        with self._lock:
            if self._running:
                return
            self._stop_event.clear()
            self._threads = [
                threading.Thread(
                    target=self._work,
                    name=f"codebase-reader-worker-{i}",
                    daemon=True,
                )
                for i in range(self.max_workers)
            ]
            for thread in self._threads:
                thread.start()
            self._running = True
        logger.debug(f"Started {self.max_workers} workers (queue capacity {self.capacity})")

    def stop(self) -> None:
        """Signal every worker to exit and wait for all of them. No-op while stopped."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._stop_event.set()
            threads = self._threads
            self._threads = []

        for thread in threads:
            thread.join()

        # Nothing consumes leftovers once the workers are gone
        for q in (self._jobs, self._results):
            while True:
                try:
                    q.get_nowait()
                except queue.Empty:
                    break
        logger.debug("Worker pool stopped")

    def submit(self, job: AnalysisJob) -> None:
        """
        Queue a job without blocking.

        Raises:
            PoolNotRunningError: If the pool is stopped
            QueueFullError: If the job queue is at capacity
        """
        if not self.running:
            raise PoolNotRunningError()
        try:
            self._jobs.put_nowait(job)
        except queue.Full:
            raise QueueFullError(self.capacity) from None

    def get_result(self, timeout: Optional[float] = None) -> Optional[JobResult]:
        """Next finished job, blocking up to ``timeout`` seconds (None = forever)."""
        try:
            return self._results.get(timeout=timeout)
        except queue.Empty:
            return None

    def __enter__(self) -> WorkerPool:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    # ── Worker loop ────────────────────────────────────────────

    def _work(self) -> None:
        while not self._stop_event.is_set():
            try:
                job = self._jobs.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            self._deliver(self._process(job))

    @staticmethod
    def _process(job: AnalysisJob) -> JobResult:
        try:
            return JobResult(job.path, result=job.parser.parse(job.path, job.content))
        except Exception as e:
            # A failing parser must not take its worker down
            logger.debug(f"Parser {job.parser!r} failed on {job.path}: {e}")
            return JobResult(job.path, error=e)

    def _deliver(self, outcome: JobResult) -> None:
        while not self._stop_event.is_set():
            try:
                self._results.put(outcome, timeout=self.poll_interval)
                return
            except queue.Full:
                continue
