"""Tests for the job orchestrator."""

import os
import threading
import time
from unittest.mock import MagicMock

import pytest

from config.constants import JobState, ProbeKind
from config.settings import JobSettings
from exceptions.base import ConfigurationError
from monitoring.orchestrator import EXIT_JOB_TERMINATED, EXIT_OK, JobOrchestrator


def factory_of(make_tick) -> MagicMock:
    factory = MagicMock()
    factory.create.side_effect = make_tick
    return factory


def idle_factory() -> MagicMock:
    return factory_of(lambda host, kind: (lambda: None))


class TestJobOrchestratorConfiguration:
    """Tests for pool sizing and job registration."""

    def test_configured_pool_size(self, settings) -> None:
        """Test that a positive thread number is used as is."""
        assert JobOrchestrator(settings, idle_factory()).pool_size() == 2

    def test_default_pool_size(self, settings) -> None:
        """Test that 0 threads means one per CPU."""
        settings = settings.model_copy(
            update={"job": settings.job.model_copy(update={"scheduled_thread_number": 0})}
        )
        assert JobOrchestrator(settings, idle_factory()).pool_size() == (os.cpu_count() or 1)

    def test_three_jobs_per_host(self, settings) -> None:
        """Test that every host gets one job per probe kind."""
        settings = settings.model_copy(
            update={"job": JobSettings(hosts=["10.0.0.1", "example.com:8080"])}
        )
        factory = idle_factory()

        scheduler = JobOrchestrator(settings, factory).build_scheduler()
        try:
            names = sorted(job.name for job in scheduler.jobs)
        finally:
            scheduler.shutdown()

        assert names == sorted(
            f"job-{host}-{kind.value}" for host in ("10.0.0.1", "example.com:8080") for kind in ProbeKind
        )
        assert factory.create.call_count == 6
        assert all(job.state == JobState.SCHEDULED for job in scheduler.jobs)

    def test_delays_come_from_settings(self, settings) -> None:
        """Test that each kind uses its own delay."""
        settings = settings.model_copy(
            update={"tcp": settings.tcp.model_copy(update={"delay": 1500})}
        )
        scheduler = JobOrchestrator(settings, idle_factory()).build_scheduler()
        try:
            delays = {job.kind: job.delay_seconds for job in scheduler.jobs}
        finally:
            scheduler.shutdown()

        assert delays[ProbeKind.TCP] == 1.5
        assert delays[ProbeKind.ICMP] == 0.02

    def test_no_hosts(self, settings) -> None:
        """Test that an empty host list is a configuration error."""
        settings = settings.model_copy(update={"job": JobSettings(hosts=[])})

        with pytest.raises(ConfigurationError) as exc_info:
            JobOrchestrator(settings, idle_factory()).start_workflow()

        assert exc_info.value.details["config_key"] == "JOB_HOSTS"


class TestJobOrchestratorWorkflow:
    """Tests for start_workflow() and stop()."""

    def test_terminated_job_stops_workflow(self, settings, log_records) -> None:
        """Test that a job killed by a defect ends the workflow with exit code 1."""

        def make_tick(host, kind):
            if kind == ProbeKind.TRACEROUTE:
                def tick():
                    raise RuntimeError("defect in tick")
                return tick
            return lambda: None

        orchestrator = JobOrchestrator(settings, factory_of(make_tick))

        assert orchestrator.start_workflow() == EXIT_JOB_TERMINATED

        critical = [r["message"] for r in log_records if r["level"].name == "CRITICAL"]
        assert any("job-10.0.0.1-traceroute" in m and "defect in tick" in m for m in critical)
        stats = {s["name"]: s["state"] for s in orchestrator.get_job_stats()}
        assert stats["job-10.0.0.1-traceroute"] == "terminated"

    def test_stop_from_another_thread(self, settings, log_records) -> None:
        """Test that stop() ends a healthy workflow with exit code 0."""
        ticks = []
        orchestrator = JobOrchestrator(
            settings, factory_of(lambda host, kind: (lambda: ticks.append(kind)))
        )
        result = []

        runner = threading.Thread(target=lambda: result.append(orchestrator.start_workflow()))
        runner.start()
        time.sleep(0.1)
        orchestrator.stop(reason="signal SIGTERM")
        runner.join(timeout=5)

        assert not runner.is_alive()
        assert result == [EXIT_OK]
        assert orchestrator.stop_reason == "signal SIGTERM"
        info = [r["message"] for r in log_records if r["level"].name == "INFO"]
        assert "Stop requested (signal SIGTERM), shutting down" in info
        assert orchestrator.stopping
        assert set(ticks) == set(ProbeKind)

    def test_stop_before_start(self, settings) -> None:
        """Test that a stop requested before the start schedules nothing."""
        tick = MagicMock()
        orchestrator = JobOrchestrator(settings, factory_of(lambda host, kind: tick))

        orchestrator.stop()

        assert orchestrator.start_workflow() == EXIT_OK
        tick.assert_not_called()

    def test_stats_before_start(self, settings) -> None:
        """Test that there are no stats before the workflow starts."""
        assert JobOrchestrator(settings, idle_factory()).get_job_stats() == []
