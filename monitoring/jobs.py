"""
============================================================================
PING ORCHESTRATOR - PROBE JOB BODIES
============================================================================
One tick of a host/probe job:

    1. name the worker thread "job-<host>-<kind>" and bind host/probe
       to every log record of the tick
    2. run the probe through the controller and unwrap the envelope
    3. success -> log and return
    4. failure -> assemble a report of all three probes for the host,
       post it and unwrap that envelope too

Every BatchJobError (envelope errors, aggregation errors) ends the tick
with a log line carrying the flattened cause chain. Anything else is a
defect and escapes, which terminates the job and stops the orchestrator.
============================================================================
"""

import threading
from typing import Callable, Dict

from config.constants import JOB_THREAD_NAME_TEMPLATE, ProbeKind
from exceptions.orchestration import BatchJobError
from monitoring.controllers import ProbeController, ReportController
from monitoring.reports import ReportAssembler
from monitoring.response import Response, unwrap
from utils.logger import error_stack, get_logger


logger = get_logger("Job")


def job_name(host: str, kind: ProbeKind) -> str:
    return JOB_THREAD_NAME_TEMPLATE.format(host=host, kind=kind.value)


class ProbeJobFactory:
    """
    Builds the tick bodies the scheduler runs.

    Usage
    -----
        factory = ProbeJobFactory(probe_controller, report_controller, assembler)
        tick = factory.create("10.0.0.1", ProbeKind.ICMP)
        tick()
    """

    def __init__(
        self,
        probe_controller: ProbeController,
        report_controller: ReportController,
        report_assembler: ReportAssembler,
    ):
        self.probe_controller = probe_controller
        self.report_controller = report_controller
        self.report_assembler = report_assembler

        self._probes: Dict[ProbeKind, Callable[[str], Response]] = {
            ProbeKind.ICMP: probe_controller.post_icmp,
            ProbeKind.TCP: probe_controller.post_tcp,
            ProbeKind.TRACEROUTE: probe_controller.post_traceroute,
        }

    def create(self, host: str, kind: ProbeKind) -> Callable[[], None]:
        def tick() -> None:
            self.run_tick(host, kind)

        tick.__name__ = job_name(host, kind)
        return tick

    def run_tick(self, host: str, kind: ProbeKind) -> None:
        thread = threading.current_thread()
        previous_name = thread.name
        thread.name = job_name(host, kind)
        try:
            with logger.contextualize(host=host, probe=kind.value):
                self._execute(host, kind)
        finally:
            thread.name = previous_name

    def _execute(self, host: str, kind: ProbeKind) -> None:
        description = kind.description
        try:
            result = unwrap(self._probes[kind](host), host, description)

            if result is not None and result.success:
                logger.info(f"{description} for host {host}: success")
                return

            logger.warning(f"{description} for host {host}: failure, reporting")
            self._report(host, description)

        except BatchJobError as e:
            logger.log(e.log_level, "\n".join(error_stack(e)))

    def _report(self, host: str, description: str) -> None:
        report_description = f"Report for {description}"
        report = self.report_assembler.assemble(host)
        unwrap(self.report_controller.post_report(report), host, report_description)
        logger.info(f"{report_description} for host {host}: sent")
