"""
============================================================================
PING ORCHESTRATOR - RECURRING JOB SCHEDULER
============================================================================
A thread-based, fixed-delay scheduler. Every job runs on a shared
ThreadPoolExecutor; the next tick of a job is queued only once the
previous tick has returned, so ticks of one job never overlap.

Moving parts
------------
_dispatch_loop     one thread; pops due jobs off a heap ordered by
                   next_run and submits them to the worker pool
_run_job           worker side; runs one tick, then re-queues the job
                   `delay` seconds later, or marks it TERMINATED if the
                   tick raised
Condition          guards the heap and every job's state; notified on
                   every state change so supervisors never poll

Job states
----------
SCHEDULED -> RUNNING -> IDLE -> RUNNING -> ...
                     -> TERMINATED            (an exception escaped)
============================================================================
"""

import heapq
import itertools
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.constants import JobState, ProbeKind
from utils.logger import get_logger


logger = get_logger("Scheduler")


# ============================================================================
# JOB DEFINITION
# ============================================================================

@dataclass
class ScheduledJob:
    """
    Describes a single recurring host/probe job.

    Attributes
    ----------
    name : str
        Unique identifier, "job-<host>-<kind>".
    host : str
        Host the job probes.
    kind : ProbeKind
        Which probe the job runs.
    delay_seconds : float
        Time between the end of one tick and the start of the next.
    action : Callable
        The tick body; takes no arguments.
    state : JobState
        Current lifecycle state.
    last_run : Optional[float]
        Epoch timestamp of the last completed tick.
    next_run : float
        Monotonic timestamp of the next tick.
    run_count : int
        Ticks completed since startup.
    error_count : int
        Ticks that raised. Any error terminates the job, so this is 0 or 1.
    exception : Optional[BaseException]
        What terminated the job.
    """
    name: str
    host: str
    kind: ProbeKind
    delay_seconds: float
    action: Callable[[], Any]
    state: JobState = JobState.SCHEDULED
    last_run: Optional[float] = None
    next_run: float = field(default_factory=time.monotonic)
    run_count: int = 0
    error_count: int = 0
    exception: Optional[BaseException] = None

    @property
    def terminated(self) -> bool:
        return self.state == JobState.TERMINATED


# ============================================================================
# SCHEDULER
# ============================================================================

class RecurringScheduler:
    """
    Fixed-delay scheduler on a pool of worker threads.

    Usage
    -----
        scheduler = RecurringScheduler(max_workers=4)
        scheduler.register_job("job-a-icmp", "a", ProbeKind.ICMP, 5.0, tick)
        scheduler.start()
        terminated = scheduler.wait_for_termination(timeout=1.0)
        scheduler.shutdown()
    """

    def __init__(self, max_workers: int, thread_name_prefix: str = "ping-worker"):
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )

        self._cond = threading.Condition(threading.RLock())
        self._queue: List[Tuple[float, int, ScheduledJob]] = []
        self._sequence = itertools.count()
        self._jobs: Dict[str, ScheduledJob] = {}
        self._in_flight = 0

        self._running = False
        self._stop_requested = False
        self._dispatcher: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    # JOB REGISTRATION
    # ------------------------------------------------------------------

    def register_job(
        self,
        name: str,
        host: str,
        kind: ProbeKind,
        delay_seconds: float,
        action: Callable[[], Any],
        initial_delay: float = 0.0,
    ) -> ScheduledJob:
        """
        Register a new recurring job.

        The first tick runs *initial_delay* seconds after the scheduler
        starts (or after registration, if it is already running).
        """
        with self._cond:
            if name in self._jobs:
                logger.warning(f"[Scheduler] Job '{name}' already registered, overwriting")

            job = ScheduledJob(
                name=name,
                host=host,
                kind=kind,
                delay_seconds=delay_seconds,
                action=action,
                next_run=time.monotonic() + initial_delay,
            )
            self._jobs[name] = job

            if self._running:
                self._push(job)

        logger.debug(f"[Scheduler] Registered job '{name}' (delay={delay_seconds}s)")
        return job

    @property
    def jobs(self) -> List[ScheduledJob]:
        with self._cond:
            return list(self._jobs.values())

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start dispatching registered jobs."""
        with self._cond:
            if self._running:
                logger.warning("Scheduler is already running")
                return
            self._running = True

            now = time.monotonic()
            for job in self._jobs.values():
                if job.state == JobState.SCHEDULED:
                    job.next_run = max(job.next_run, now)
                    self._push(job)

        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            name="scheduler-dispatcher",
            daemon=True,
        )
        self._dispatcher.start()
        logger.info(f"✓ Scheduler started with {len(self._jobs)} jobs on {self.max_workers} workers")

    def request_stop(self) -> None:
        """Wake every supervisor waiting in wait_for_termination()."""
        with self._cond:
            self._stop_requested = True
            self._cond.notify_all()

    @property
    def stop_requested(self) -> bool:
        with self._cond:
            return self._stop_requested

    def shutdown(self, wait: bool = True) -> None:
        """
        Cancel every pending tick and wait for in-flight ticks to finish.
        """
        with self._cond:
            self._running = False
            self._stop_requested = True
            self._queue.clear()
            self._cond.notify_all()

        if self._dispatcher is not None and self._dispatcher is not threading.current_thread():
            self._dispatcher.join()
            self._dispatcher = None

        self._executor.shutdown(wait=wait, cancel_futures=True)

        with self._cond:
            for job in self._jobs.values():
                if job.state == JobState.RUNNING:
                    job.state = JobState.IDLE
            if wait:
                # Whatever is still counted was cancelled before it started
                self._in_flight = 0
            self._cond.notify_all()
        logger.info("✓ Scheduler stopped")

    # ------------------------------------------------------------------
    # SUPERVISION
    # ------------------------------------------------------------------

    def terminated_jobs(self) -> List[ScheduledJob]:
        with self._cond:
            return [job for job in self._jobs.values() if job.terminated]

    def wait_for_termination(self, timeout: Optional[float] = None) -> List[ScheduledJob]:
        """
        Block until a job terminates, a stop is requested, or *timeout*
        elapses.

        Returns
        -------
        List[ScheduledJob]
            The terminated jobs; empty on stop request or timeout.
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._stop_requested or any(j.terminated for j in self._jobs.values()),
                timeout=timeout,
            )
            return [job for job in self._jobs.values() if job.terminated]

    def wait_until_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait until no tick is running. Returns False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._in_flight == 0, timeout=timeout)

    # ------------------------------------------------------------------
    # DISPATCH
    # ------------------------------------------------------------------

    def _push(self, job: ScheduledJob) -> None:
        heapq.heappush(self._queue, (job.next_run, next(self._sequence), job))
        self._cond.notify_all()

    def _dispatch_loop(self) -> None:
        logger.debug("[Scheduler] Dispatcher started")
        with self._cond:
            while self._running:
                if not self._queue:
                    self._cond.wait()
                    continue

                next_run, _, job = self._queue[0]
                delay = next_run - time.monotonic()
                if delay > 0:
                    self._cond.wait(timeout=delay)
                    continue

                heapq.heappop(self._queue)
                job.state = JobState.RUNNING
                try:
                    self._executor.submit(self._run_job, job)
                except RuntimeError:
                    # Pool already shut down
                    job.state = JobState.IDLE
                    break
                self._in_flight += 1

        logger.debug("[Scheduler] Dispatcher exited")

    # ------------------------------------------------------------------
    # JOB EXECUTION
    # ------------------------------------------------------------------

    def _run_job(self, job: ScheduledJob) -> None:
        """
        Run a single tick, then re-queue the job or mark it TERMINATED.
        """
        start_time = time.monotonic()
        try:
            job.action()
        except BaseException as e:
            elapsed = time.monotonic() - start_time
            with self._cond:
                job.error_count += 1
                job.exception = e
                job.state = JobState.TERMINATED
                self._in_flight -= 1
                self._cond.notify_all()
            logger.opt(exception=e).critical(
                f"[Scheduler] Job '{job.name}' TERMINATED after {elapsed:.2f}s: {e!r}"
            )
            # SystemExit / KeyboardInterrupt keep propagating into the worker
            if not isinstance(e, Exception):
                raise
            return

        elapsed = time.monotonic() - start_time
        with self._cond:
            job.run_count += 1
            job.last_run = time.time()
            job.state = JobState.IDLE
            self._in_flight -= 1
            if self._running:
                job.next_run = time.monotonic() + job.delay_seconds
                self._push(job)
            self._cond.notify_all()

        logger.debug(
            f"[Scheduler] Job '{job.name}' completed in {elapsed:.2f}s "
            f"(run #{job.run_count})"
        )

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_job_stats(self) -> List[Dict[str, Any]]:
        """Return status of all registered jobs."""
        stats = []
        with self._cond:
            now_wall, now_mono = time.time(), time.monotonic()
            for job in self._jobs.values():
                stats.append({
                    "name": job.name,
                    "host": job.host,
                    "kind": job.kind.value,
                    "delay_seconds": job.delay_seconds,
                    "state": job.state.value,
                    "run_count": job.run_count,
                    "error_count": job.error_count,
                    "last_run": (
                        datetime.fromtimestamp(job.last_run).isoformat()
                        if job.last_run else None
                    ),
                    "next_run": (
                        datetime.fromtimestamp(now_wall + job.next_run - now_mono).isoformat()
                        if self._running and not job.terminated else None
                    ),
                })
        return stats
