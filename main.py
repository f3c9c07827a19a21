"""
============================================================================
PING ORCHESTRATOR - MAIN APPLICATION
============================================================================
Entry point of the background process that pings, TCP-pings and
traceroutes every configured host and reports failures.

Startup Order
-------------
1.  Load settings & configure logging
2.  Build the stores, evaluators and probe services
3.  Build the HTTP transport, report service and report assembler
4.  Build the controllers and the job factory
5.  Start the JobOrchestrator (blocks until shutdown)

Shutdown
--------
On SIGINT / SIGTERM the orchestrator is asked to stop: pending ticks are
cancelled, in-flight ticks finish, then the report pool and the HTTP
client are closed. The exit code is 1 if a job terminated or startup
failed, 0 otherwise.
============================================================================
"""

import signal
import sys
from dataclasses import dataclass
from typing import Optional

from config.settings import Settings, get_settings
from database.repositories import IcmpRepository, TcpRepository, TraceRouteRepository
from exceptions.base import PingOrchestratorException
from monitoring.controllers import ProbeController, ReportController
from monitoring.evaluators import IcmpEvaluator, TcpEvaluator, TraceRouteEvaluator
from monitoring.jobs import ProbeJobFactory
from monitoring.orchestrator import EXIT_JOB_TERMINATED, EXIT_OK, JobOrchestrator
from monitoring.reports import ReportAssembler, ReportService
from monitoring.services import IcmpProbeService, TcpProbeService, TraceRouteProbeService
from utils.logger import error_stack, get_logger, setup_logging
from utils.network import HttpTransport
from utils.terminal import TerminalTools


logger = get_logger("Main")


# ============================================================================
# WIRING
# ============================================================================

@dataclass
class Application:
    """Every long-lived component, built once by build_application()."""
    settings: Settings
    transport: HttpTransport
    icmp_service: IcmpProbeService
    tcp_service: TcpProbeService
    trace_route_service: TraceRouteProbeService
    report_assembler: ReportAssembler
    probe_controller: ProbeController
    report_controller: ReportController
    orchestrator: JobOrchestrator

    def close(self) -> None:
        self.report_assembler.shutdown()
        self.transport.close()


def build_application(settings: Settings, transport: Optional[HttpTransport] = None) -> Application:
    """
    Compose the object graph from *settings*.

    Args:
        settings: Loaded application settings
        transport: HTTP transport to use instead of a real one
    """
    transport = transport or HttpTransport()

    icmp_service = IcmpProbeService(IcmpRepository(), IcmpEvaluator(settings.icmp))
    tcp_service = TcpProbeService(TcpRepository(), TcpEvaluator(), transport, settings.tcp)
    trace_route_service = TraceRouteProbeService(
        TraceRouteRepository(), TraceRouteEvaluator(settings.traceroute)
    )

    report_assembler = ReportAssembler(
        icmp_service,
        tcp_service,
        trace_route_service,
        max_workers=settings.report.assembly_workers,
        timeout=settings.report.assembly_timeout,
    )
    report_controller = ReportController(ReportService(transport, settings.report))
    probe_controller = ProbeController(
        icmp_service,
        tcp_service,
        trace_route_service,
        TerminalTools(timeout=settings.job.command_timeout),
    )

    job_factory = ProbeJobFactory(probe_controller, report_controller, report_assembler)
    orchestrator = JobOrchestrator(settings, job_factory)

    return Application(
        settings=settings,
        transport=transport,
        icmp_service=icmp_service,
        tcp_service=tcp_service,
        trace_route_service=trace_route_service,
        report_assembler=report_assembler,
        probe_controller=probe_controller,
        report_controller=report_controller,
        orchestrator=orchestrator,
    )


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class PingOrchestratorApplication:
    """
    Top-level application: owns the startup / shutdown order.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings
        self.app: Optional[Application] = None

    def startup(self) -> bool:
        """Load settings and build every component. False on failure."""
        logger.info("=" * 74)
        logger.info("  STARTING UP …")
        logger.info("=" * 74)

        try:
            if self.settings is None:
                self.settings = get_settings()
            setup_logging(self.settings.logging)

            logger.info("── Phase 1: Components ───────────────────────────")
            self.app = build_application(self.settings)
            logger.info(f"  ✓ Hosts: {', '.join(self.settings.job.hosts) or '(none)'}")
            logger.info(f"  ✓ Report endpoint: {self.settings.report.api_url}")
            return True

        except PingOrchestratorException as e:
            logger.critical(f"  ✗ Startup failed: {' '.join(error_stack(e))}")
            return False

    def run(self) -> int:
        """Run the orchestrator until it stops. Returns the exit code."""
        if self.app is None:
            return EXIT_JOB_TERMINATED

        logger.info("── Phase 2: Jobs ─────────────────────────────────")
        try:
            return self.app.orchestrator.start_workflow()
        except PingOrchestratorException as e:
            logger.critical(f"  ✗ Workflow failed: {' '.join(error_stack(e))}")
            return EXIT_JOB_TERMINATED
        finally:
            self.shutdown()

    def stop(self, reason: Optional[str] = None) -> None:
        if self.app is not None:
            self.app.orchestrator.stop(reason)

    def shutdown(self) -> None:
        logger.info("=" * 74)
        logger.info("  SHUTTING DOWN …")
        logger.info("=" * 74)

        if self.app is not None:
            self.app.close()
            logger.info("  ✓ Report pool and HTTP client closed")

        logger.info("  ✓ SHUTDOWN COMPLETE")


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(application: PingOrchestratorApplication) -> None:
    """
    Install SIGTERM / SIGINT handlers so the jobs wind down gracefully.
    """
    # No logging in here: the handler may interrupt a thread holding a sink lock
    def _handle_signal(signum, frame):
        application.stop(reason=f"signal {signal.Signals(signum).name}")

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            signal.signal(sig, _handle_signal)
        except (ValueError, OSError):
            # Not in the main thread, or the platform lacks this signal
            logger.debug(f"Can't install a handler for {sig.name}")


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main() -> int:
    application = PingOrchestratorApplication()
    _install_signal_handlers(application)

    if not application.startup():
        logger.error("  ✗ Startup failed — exiting")
        return EXIT_JOB_TERMINATED

    exit_code = application.run()
    if exit_code == EXIT_OK:
        logger.info("Stopped on request")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
