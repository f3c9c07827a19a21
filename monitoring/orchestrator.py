"""
============================================================================
PING ORCHESTRATOR - JOB ORCHESTRATOR
============================================================================
Creates three recurring jobs (ICMP, TCP, traceroute) for every configured
host, runs them on one worker pool and supervises them.

Supervision blocks on the scheduler's condition variable, woken when a
job terminates or a stop is requested. A terminated job means an error
escaped a tick body; it is logged as CRITICAL and the whole workflow
shuts down.
============================================================================
"""

import os
import threading
from typing import Any, Dict, List, Optional

from config.constants import ProbeKind
from config.settings import Settings
from exceptions.base import ConfigurationError
from monitoring.jobs import ProbeJobFactory, job_name
from monitoring.scheduler import RecurringScheduler
from utils.logger import error_stack, get_logger


logger = get_logger("Orchestrator")

EXIT_OK = 0
EXIT_JOB_TERMINATED = 1


class JobOrchestrator:
    """
    Schedules and supervises every host/probe job.

    Usage
    -----
        orchestrator = JobOrchestrator(settings, job_factory)
        exit_code = orchestrator.start_workflow()   # blocks
        # from a signal handler or another thread:
        orchestrator.stop()
    """

    def __init__(self, settings: Settings, job_factory: ProbeJobFactory):
        self.settings = settings
        self.job_factory = job_factory

        self.scheduler: Optional[RecurringScheduler] = None
        self._stop_event = threading.Event()
        self.stop_reason: Optional[str] = None

    # ------------------------------------------------------------------
    # CONFIGURATION
    # ------------------------------------------------------------------

    def pool_size(self) -> int:
        """Configured thread count, or the number of CPUs when it is 0."""
        configured = self.settings.job.scheduled_thread_number
        if configured > 0:
            return configured
        return os.cpu_count() or 1

    def _delays(self) -> Dict[ProbeKind, float]:
        return {
            ProbeKind.ICMP: self.settings.icmp.delay_seconds,
            ProbeKind.TCP: self.settings.tcp.delay_seconds,
            ProbeKind.TRACEROUTE: self.settings.traceroute.delay_seconds,
        }

    def build_scheduler(self) -> RecurringScheduler:
        """Create the scheduler and register three jobs per host."""
        hosts = self.settings.job.hosts
        if not hosts:
            raise ConfigurationError("No hosts configured", config_key="JOB_HOSTS")

        scheduler = RecurringScheduler(max_workers=self.pool_size())
        delays = self._delays()

        for host in hosts:
            for kind in ProbeKind:
                scheduler.register_job(
                    name=job_name(host, kind),
                    host=host,
                    kind=kind,
                    delay_seconds=delays[kind],
                    action=self.job_factory.create(host, kind),
                )

        return scheduler

    # ------------------------------------------------------------------
    # WORKFLOW
    # ------------------------------------------------------------------

    def start_workflow(self) -> int:
        """
        Run every job until stop() is called or a job terminates.

        Returns
        -------
        int
            EXIT_OK after a requested stop, EXIT_JOB_TERMINATED when a
            job died.
        """
        self.scheduler = self.build_scheduler()
        hosts = self.settings.job.hosts
        logger.info(
            f"Scheduling {len(hosts) * len(ProbeKind)} jobs for {len(hosts)} hosts "
            f"on {self.scheduler.max_workers} threads"
        )

        if self._stop_event.is_set():
            logger.info("Stop requested before start, nothing scheduled")
            return EXIT_OK

        self.scheduler.start()
        for stats in self.scheduler.get_job_stats():
            logger.debug(f"  {stats['name']}: every {stats['delay_seconds']}s, next {stats['next_run']}")
        exit_code = EXIT_OK
        interval = self.settings.job.supervision_interval

        try:
            while not self._stop_event.is_set():
                terminated = self.scheduler.wait_for_termination(timeout=interval)
                if terminated:
                    for job in terminated:
                        stack = error_stack(job.exception) if job.exception else ["Error: unknown"]
                        logger.critical(
                            f"Job {job.name} stopped recurring, shutting down: " + " ".join(stack)
                        )
                    exit_code = EXIT_JOB_TERMINATED
                    break

            if exit_code == EXIT_OK:
                logger.info(f"Stop requested ({self.stop_reason or 'no reason given'}), shutting down")
        finally:
            self._shutdown()

        return exit_code

    def stop(self, reason: Optional[str] = None) -> None:
        """
        Request an orderly shutdown. Only sets flags and notifies, so it
        can run inside a signal handler; the supervision loop logs it.
        """
        if reason and self.stop_reason is None:
            self.stop_reason = reason
        self._stop_event.set()
        if self.scheduler is not None:
            self.scheduler.request_stop()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def _shutdown(self) -> None:
        logger.info("Shutting down the worker pool")
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            for stats in self.scheduler.get_job_stats():
                logger.debug(f"  {stats['name']}: {stats['state']}, runs={stats['run_count']}")

    def get_job_stats(self) -> List[Dict[str, Any]]:
        if self.scheduler is None:
            return []
        return self.scheduler.get_job_stats()
